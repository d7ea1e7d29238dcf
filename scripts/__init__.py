"""Long-running activities of the bot: digest scheduler, mention ingestion and the entry-point."""

"""Text transforms for Obsidian Hugo export."""

"""MindVault: a personal knowledge vault with AI-generated summaries."""

"""Local business directory backend: provider matching funnel service."""

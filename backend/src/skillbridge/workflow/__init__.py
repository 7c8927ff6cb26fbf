"""Cross-tenant request workflow (talent and opportunity requests)."""

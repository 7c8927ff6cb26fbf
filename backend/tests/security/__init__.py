"""Security tests for SkillBridge: tenant isolation and authentication bypass."""

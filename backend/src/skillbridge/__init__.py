"""SkillBridge - multi-tenant SES/END marketplace backend."""

__version__ = "0.1.0"

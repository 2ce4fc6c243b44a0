# Core package - foundational components
#
# Modules:
# - config: Application settings
# - logging: Structured logging
# - storage: Record store gateway (SQL via SQLAlchemy async)

"""
Infrastructure Layer

Contains all external dependencies and implementations:
- Database models and SQLAlchemy repositories
- Coupon catalog caching
- Configuration management
- Logging infrastructure
"""

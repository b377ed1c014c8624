"""
Bladewatch API Package
======================

FastAPI application, dependencies and routes.

Author: Bladewatch Team
Version: 1.0.0
"""

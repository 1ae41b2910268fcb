#!/usr/bin/env python3
"""
Celery worker entry point for saved-search match refreshes
"""
from app.core.celery_app import celery_app

if __name__ == '__main__':
    celery_app.start()

"""
Celery Configuration for the Field Ops Backend

This module configures Celery for async task processing.
Used primarily for:
- Refreshing task search text after large customer/location edits

Broker: Redis
"""

import os
from celery import Celery

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'fieldops.settings')

# Create Celery app
app = Celery('fieldops')

# Configure Celery using Django settings with CELERY_ prefix
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks in all registered Django apps
app.autodiscover_tasks()

# services/usage-service/src/apps/core/models/user.py
"""
User Model

Minimal projection of the platform's users table.
"""

import uuid
from django.db import models


class User(models.Model):
    """
    Platform user as seen by the usage service.

    Identity, roles and credentials are owned by the identity service;
    only the fields shown on usage reports live here.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )
    email = models.EmailField(unique=True, db_index=True)
    first_name = models.CharField(max_length=150, blank=True, null=True)
    last_name = models.CharField(max_length=150, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'users'
        ordering = ['email']

    def __str__(self):
        return self.email

    @property
    def full_name(self) -> str:
        return ' '.join(part for part in (self.first_name, self.last_name) if part)

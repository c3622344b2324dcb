from django.db import models
from django.contrib.auth.models import AbstractUser
# Create your models here.

class User(AbstractUser):
    class Role(models.TextChoices):
        LECTURER = "LECTURER"
        REGISTRAR = "REGISTRAR"
        ADMIN = "ADMIN"
        STUDENT = "STUDENT"
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.LECTURER)

    def __str__(self):
        return self.get_full_name() or self.username

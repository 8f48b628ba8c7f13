"""
records/models.py
─────────────────
The document store and the entity vocabulary.

Document        – one schemaless record inside a named collection.
Collection      – the closed set of six collections the console knows.
Role, ClassType, PaymentType, ExpenseCategory
                – the choice enums used by the entity documents.

Every entity (user, student, teacher, class, payment, expense) is stored as a
Document whose `data` holds the entity fields and whose `key` is the
store-assigned identifier exposed to the rest of the app as `id`.
Optional fields are represented by omission inside `data`, never by null.
"""

from django.db import models
from django.utils.crypto import get_random_string

# Record identifiers: 20 random alphanumeric characters.
DOCUMENT_KEY_LENGTH = 20


def new_document_key():
    return get_random_string(DOCUMENT_KEY_LENGTH)


# ── Entity vocabulary ─────────────────────────────────────────────────────────

class Collection(models.TextChoices):
    USERS    = 'users',    'Users'
    STUDENTS = 'students', 'Students'
    TEACHERS = 'teachers', 'Teachers'
    CLASSES  = 'classes',  'Classes'
    PAYMENTS = 'payments', 'Payments'
    EXPENSES = 'expenses', 'Expenses'


class Role(models.TextChoices):
    USER       = 'user',       'User'
    ADMIN      = 'admin',      'Admin'
    SUPERADMIN = 'superadmin', 'Super admin'


class ClassType(models.TextChoices):
    ARABIC = 'arabic', 'Arabic'
    FRENCH = 'french', 'French'


class PaymentType(models.TextChoices):
    ENROLLMENT = 'enrollment', 'Enrollment'
    MONTHLY    = 'monthly',    'Monthly'
    UNIFORM    = 'uniform',    'Uniform'


class ExpenseCategory(models.TextChoices):
    SALARY      = 'salary',      'Salary'
    ELECTRICITY = 'electricity', 'Electricity'
    WATER       = 'water',       'Water'
    PERSONNEL   = 'personnel',   'Personnel'
    OTHER       = 'other',       'Other'


# ── Document store ────────────────────────────────────────────────────────────

class Document(models.Model):
    """
    A single record of one collection.

    The store knows nothing about the entity shapes: `data` is written exactly
    as the repository layer hands it over, so an exported document can be
    imported back field-for-field.
    """

    collection = models.CharField(
        max_length=20,
        choices=Collection.choices,
        db_index=True,
    )
    key = models.CharField(
        max_length=64,
        default=new_document_key,
        help_text='Store-assigned identifier, exposed as the entity id.',
    )
    data = models.JSONField(
        default=dict,
        help_text='Entity fields. Absent optional fields are omitted, never null.',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['collection', 'created_at', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['collection', 'key'],
                name='unique_document_key_per_collection',
            ),
        ]
        verbose_name = 'Document'
        verbose_name_plural = 'Documents'

    def __str__(self):
        return f"{self.collection}/{self.key}"

    def as_record(self):
        """The document as the app sees it: `{'id': key, **data}`."""
        return {'id': self.key, **self.data}

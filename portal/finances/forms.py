"""
finances/forms.py
─────────────────
Payment and expense forms.
"""

from django import forms
from django.utils import timezone

from records.forms import RecordForm
from records.models import ExpenseCategory, PaymentType


class PaymentForm(RecordForm):
    """
    Record a payment made for a student.

    Key behaviour:
    - `month` (YYYY-MM) is required for monthly payments,
    - `description` is required for uniform payments,
    - neither applies to enrollment payments and both are dropped on save.
    Every failing rule is reported together.
    """

    student_id = forms.ChoiceField(
        label='Student',
        error_messages={'required': 'Please select a student.'},
    )
    type = forms.ChoiceField(choices=PaymentType.choices, initial=PaymentType.MONTHLY, label='Payment type')
    month = forms.CharField(
        required=False,
        label='Month',
        widget=forms.TextInput(attrs={'type': 'month', 'placeholder': 'YYYY-MM'}),
    )
    description = forms.CharField(
        required=False,
        max_length=200,
        label='Description',
        widget=forms.TextInput(attrs={'placeholder': 'e.g. Uniform size M'}),
    )
    amount = forms.DecimalField(
        max_digits=12,
        decimal_places=2,
        label='Amount',
        widget=forms.NumberInput(attrs={'step': '1', 'min': '1', 'placeholder': '0'}),
    )
    date = forms.DateField(
        label='Payment date',
        widget=forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
        input_formats=['%Y-%m-%d'],
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        students = sorted(
            self.state.students,
            key=lambda s: (s.get('last_name', '').lower(), s.get('first_name', '').lower()),
        )
        self.fields['student_id'].choices = [('', '— select student —')] + [
            (s['id'], f"{s.get('last_name', '')} {s.get('first_name', '')} - {s.get('registration_number', '')}")
            for s in students
        ]
        if not self.is_bound and not self.initial.get('date'):
            self.initial['date'] = timezone.localdate().strftime('%Y-%m-%d')

    def clean_amount(self):
        amount = self.cleaned_data['amount']
        if amount <= 0:
            raise forms.ValidationError('The amount must be greater than 0.')
        return amount

    def clean_month(self):
        month = self.cleaned_data.get('month', '').strip()
        if month:
            try:
                year, number = month.split('-')
                valid = len(year) == 4 and 1 <= int(number) <= 12 and int(year) > 0
            except ValueError:
                valid = False
            if not valid:
                raise forms.ValidationError('Enter the month as YYYY-MM.')
        return month

    def clean(self):
        cleaned = super().clean()
        payment_type = cleaned.get('type')
        if payment_type == PaymentType.MONTHLY and not cleaned.get('month') and 'month' not in self.errors:
            self.add_error('month', 'Please select a month for a monthly payment.')
        if payment_type == PaymentType.UNIFORM and not (cleaned.get('description') or '').strip():
            self.add_error('description', 'Please add a description for the uniform.')
        return cleaned

    def cleared_fields(self):
        return [name for name in ('month', 'description') if not self.to_document().get(name)]


class ExpenseForm(RecordForm):
    """Log money spent by the school (salaries, utilities, …)."""

    date = forms.DateField(
        label='Date of expense',
        widget=forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
        input_formats=['%Y-%m-%d'],
    )
    amount = forms.DecimalField(
        max_digits=12,
        decimal_places=2,
        label='Amount',
        widget=forms.NumberInput(attrs={'step': '1', 'min': '1', 'placeholder': '0'}),
    )
    category = forms.ChoiceField(choices=ExpenseCategory.choices, initial=ExpenseCategory.OTHER, label='Category')
    description = forms.CharField(
        max_length=300,
        label='Description',
        widget=forms.Textarea(attrs={'rows': 2, 'placeholder': 'What was the money spent on?'}),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not self.is_bound and not self.initial.get('date'):
            self.initial['date'] = timezone.localdate().strftime('%Y-%m-%d')

    def clean_amount(self):
        amount = self.cleaned_data['amount']
        if amount <= 0:
            raise forms.ValidationError('The amount must be greater than 0.')
        return amount

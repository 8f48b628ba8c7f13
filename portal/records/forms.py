"""
records/forms.py
────────────────
Entity forms for the school records: students, teachers and classes.

Every record form is a plain `forms.Form` (documents, not model instances)
built on RecordForm, which knows how to:
  • pre-fill itself from an existing record (`instance=`)
  • turn cleaned data into a document payload (`to_document()`), mapping
    blank optional values to None so the repository drops them
  • list the optional fields left blank on edit (`cleared_fields()`) so the
    repository can remove them from the stored document

Validation collects every violation before the form is re-rendered.
"""

from django import forms

from .models import ClassType

NO_CLASS = ('', '— none —')


def add_form_control_class(form):
    """Inject a uniform CSS class onto every visible widget."""
    for field in form.fields.values():
        field.widget.attrs.setdefault('class', 'form-control-input')
    return form


def _class_choices(state, class_type):
    return [NO_CLASS] + [
        (c['id'], c.get('name', c['id']))
        for c in sorted(state.classes_of_type(class_type), key=lambda c: c.get('name', ''))
    ]


class RecordForm(forms.Form):
    """Base form for one document of a collection."""

    optional_fields = ()

    def __init__(self, *args, state=None, instance=None, **kwargs):
        self.state = state
        self.instance = instance
        if instance is not None and 'initial' not in kwargs:
            kwargs['initial'] = {k: v for k, v in instance.items() if k != 'id'}
        super().__init__(*args, **kwargs)
        add_form_control_class(self)

    @property
    def is_edit(self):
        return self.instance is not None

    def to_document(self):
        document = {}
        for name in self.fields:
            value = self.cleaned_data.get(name)
            if isinstance(value, str):
                value = value.strip()
            document[name] = value if value not in ('', None) else None
        return document

    def cleared_fields(self):
        document = self.to_document()
        return [name for name in self.optional_fields if document.get(name) is None]


# ── Students ──────────────────────────────────────────────────────────────────

class StudentForm(RecordForm):
    """
    A student needs a unique registration number, a name, a birth date and at
    least one class: Arabic, French or both.
    """

    optional_fields = ('arabic_class_id', 'french_class_id')

    registration_number = forms.CharField(max_length=50, label='Registration number')
    last_name  = forms.CharField(max_length=100, label='Last name')
    first_name = forms.CharField(max_length=100, label='First name')
    birth_date = forms.DateField(
        label='Birth date',
        widget=forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
        input_formats=['%Y-%m-%d'],
    )
    arabic_class_id = forms.ChoiceField(required=False, label='Arabic class')
    french_class_id = forms.ChoiceField(required=False, label='French class')

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['arabic_class_id'].choices = _class_choices(self.state, ClassType.ARABIC)
        self.fields['french_class_id'].choices = _class_choices(self.state, ClassType.FRENCH)

    def clean_registration_number(self):
        number = self.cleaned_data['registration_number'].strip()
        current_id = self.instance['id'] if self.instance else None
        taken = any(
            s.get('registration_number') == number and s['id'] != current_id
            for s in self.state.students
        )
        if taken:
            raise forms.ValidationError('A student with this registration number already exists.')
        return number

    def clean(self):
        cleaned = super().clean()
        if not cleaned.get('arabic_class_id') and not cleaned.get('french_class_id'):
            raise forms.ValidationError(
                'At least one class (Arabic or French) must be selected.'
            )
        return cleaned


# ── Teachers ──────────────────────────────────────────────────────────────────

class TeacherForm(RecordForm):
    """Teachers may teach one Arabic and one French class; both are optional."""

    optional_fields = ('subject', 'arabic_class_id', 'french_class_id')

    registration_number = forms.CharField(max_length=50, label='Registration number')
    last_name  = forms.CharField(max_length=100, label='Last name')
    first_name = forms.CharField(max_length=100, label='First name')
    subject    = forms.CharField(max_length=100, required=False, label='Subject (optional)')
    arabic_class_id = forms.ChoiceField(required=False, label='Arabic class')
    french_class_id = forms.ChoiceField(required=False, label='French class')

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['arabic_class_id'].choices = _class_choices(self.state, ClassType.ARABIC)
        self.fields['french_class_id'].choices = _class_choices(self.state, ClassType.FRENCH)


# ── Classes ───────────────────────────────────────────────────────────────────

class ClassForm(RecordForm):

    name = forms.CharField(
        max_length=50,
        label='Class name',
        widget=forms.TextInput(attrs={'placeholder': 'e.g. CM1'}),
    )
    type = forms.ChoiceField(choices=ClassType.choices, initial=ClassType.FRENCH, label='Type')

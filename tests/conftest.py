import pytest

from accounts.session import hash_password
from records import repository


@pytest.fixture(autouse=True)
def fast_hashing(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    settings.STORAGES = {
        'default':     {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
        'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
    }


@pytest.fixture
def make_user(db):
    def _make(username, role, password='secret123'):
        user_id = repository.users.add({
            'username': username,
            'password': hash_password(password),
            'role':     role,
        })
        return repository.users.get(user_id)
    return _make


@pytest.fixture
def sign_in(client, make_user):
    """Create an account with *role* and sign the test client in as it."""
    def _sign_in(role, username=None):
        user = make_user(username or f'{role}-account', role)
        response = client.post('/login/', {'username': user['username'], 'password': 'secret123'})
        assert response.status_code == 302
        return user
    return _sign_in


@pytest.fixture
def school(db):
    """Two classes, two students, one teacher and three payments."""
    cm1_fr = repository.classes.add({'name': 'CM1', 'type': 'french'})
    cm1_ar = repository.classes.add({'name': 'CM1', 'type': 'arabic'})
    ps_fr = repository.classes.add({'name': 'PS', 'type': 'french'})

    diallo = repository.students.add({
        'registration_number': 'R-001',
        'last_name':           'Diallo',
        'first_name':          'Awa',
        'birth_date':          '2015-04-02',
        'french_class_id':     cm1_fr,
        'arabic_class_id':     cm1_ar,
    })
    ndiaye = repository.students.add({
        'registration_number': 'R-002',
        'last_name':           'Ndiaye',
        'first_name':          'Moussa',
        'birth_date':          '2016-09-12',
        'french_class_id':     cm1_fr,
    })
    teacher = repository.teachers.add({
        'registration_number': 'T-001',
        'last_name':           'Sow',
        'first_name':          'Fatou',
        'subject':             'Maths',
        'french_class_id':     cm1_fr,
    })

    p1 = repository.payments.add({
        'student_id': diallo, 'date': '2026-01-10', 'amount': 5000,
        'type': 'monthly', 'month': '2026-01',
    })
    p2 = repository.payments.add({
        'student_id': ndiaye, 'date': '2026-02-05', 'amount': 15000, 'type': 'enrollment',
    })
    p3 = repository.payments.add({
        'student_id': diallo, 'date': '2026-03-01', 'amount': 7500,
        'type': 'uniform', 'description': 'Size M',
    })
    return {
        'cm1_fr': cm1_fr, 'cm1_ar': cm1_ar, 'ps_fr': ps_fr,
        'diallo': diallo, 'ndiaye': ndiaye, 'teacher': teacher,
        'payments': [p1, p2, p3],
    }

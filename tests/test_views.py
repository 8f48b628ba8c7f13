from io import BytesIO

import pytest
from openpyxl import load_workbook

from accounts import access
from records import exports, repository
from records.errors import StoreError
from records.exports import XLSX_CONTENT_TYPE, export_filename
from records.state import load_state

pytestmark = pytest.mark.django_db


def test_anonymous_visitors_are_sent_to_login(client):
    response = client.get('/students/')
    assert response.status_code == 302
    assert response.url == '/login/?next=/students/'


def test_root_redirects_by_role(client, sign_in):
    assert client.get('/').url == '/login/'
    sign_in('superadmin')
    assert client.get('/').url == '/dashboard/'


@pytest.mark.parametrize('url', ['/dashboard/', '/users/', '/database/'])
def test_user_role_is_bounced_to_students(client, sign_in, url):
    sign_in('user')
    response = client.get(url)
    assert response.status_code == 302
    assert response.url == '/students/'


def test_navigation_matches_role(client, sign_in):
    sign_in('admin')
    body = client.get('/students/').content.decode()
    assert 'href="/dashboard/"' in body
    assert 'href="/users/"' not in body
    assert 'href="/database/"' not in body


def test_load_failure_renders_error_page(client, sign_in, monkeypatch):
    sign_in('admin')

    def broken():
        raise StoreError('Error loading data. Please refresh the page.')

    monkeypatch.setattr(access, 'load_state', broken)
    response = client.get('/students/')

    assert response.status_code == 503
    assert 'Error loading data. Please refresh the page.' in response.content.decode()


# ── Students ──────────────────────────────────────────────────────────────────

def test_student_list_resolves_class_names(client, sign_in, school):
    sign_in('user')
    body = client.get('/students/').content.decode()
    assert 'Diallo' in body and 'CM1' in body
    assert '/edit/' not in body


def test_admin_creates_a_student(client, sign_in, school):
    sign_in('admin')

    response = client.post('/students/new/', {
        'registration_number': 'R-010',
        'last_name':           'Fall',
        'first_name':          'Ibra',
        'birth_date':          '2017-05-05',
        'french_class_id':     school['ps_fr'],
        'arabic_class_id':     '',
    })

    assert response.status_code == 302
    created = next(s for s in repository.students.get_all() if s['registration_number'] == 'R-010')
    assert created['french_class_id'] == school['ps_fr']
    assert 'arabic_class_id' not in created


def test_edit_can_clear_an_optional_class(client, sign_in, school):
    sign_in('admin')

    client.post(f'/students/{school["diallo"]}/edit/', {
        'registration_number': 'R-001',
        'last_name':           'Diallo',
        'first_name':          'Awa',
        'birth_date':          '2015-04-02',
        'french_class_id':     school['cm1_fr'],
        'arabic_class_id':     '',
    })

    assert 'arabic_class_id' not in repository.students.get(school['diallo'])


def test_user_role_cannot_reach_edit_endpoints(client, sign_in, school):
    sign_in('user')

    response = client.post(f'/students/{school["diallo"]}/delete/')

    assert response.status_code == 302
    assert response.url == '/students/'
    assert repository.students.get(school['diallo']) is not None


def test_store_error_on_save_keeps_the_form(client, sign_in, school, monkeypatch):
    sign_in('admin')

    def broken(data):
        raise StoreError()

    monkeypatch.setattr(repository.students, 'add', broken)
    response = client.post('/students/new/', {
        'registration_number': 'R-011',
        'last_name':           'Sarr',
        'first_name':          'Binta',
        'birth_date':          '2016-01-01',
        'french_class_id':     school['ps_fr'],
    })

    assert response.status_code == 200
    body = response.content.decode()
    assert 'The database is unavailable. Please try again.' in body
    assert 'value="Sarr"' in body


# ── Classes ───────────────────────────────────────────────────────────────────

def test_class_with_students_is_not_deleted(client, sign_in, school):
    sign_in('admin')

    response = client.post(f'/classes/{school["cm1_fr"]}/delete/', follow=True)

    assert 'This class cannot be deleted: it still has 2 student(s).' in response.content.decode()
    assert repository.classes.get(school['cm1_fr']) is not None
    assert repository.students.get(school['ndiaye'])['french_class_id'] == school['cm1_fr']


def test_empty_class_is_deleted_after_confirmation(client, sign_in, school):
    sign_in('admin')

    assert client.get(f'/classes/{school["ps_fr"]}/delete/').status_code == 200
    client.post(f'/classes/{school["ps_fr"]}/delete/')

    assert repository.classes.get(school['ps_fr']) is None


def test_class_detail_lists_members(client, sign_in, school):
    sign_in('user')
    body = client.get(f'/classes/{school["cm1_fr"]}/').content.decode()
    assert 'Ndiaye' in body and 'Sow' in body


# ── Spreadsheet export ────────────────────────────────────────────────────────

def test_student_export_is_a_workbook_of_display_rows(client, sign_in, school):
    sign_in('user')

    response = client.get('/students/export/')

    assert response['Content-Type'] == XLSX_CONTENT_TYPE
    assert export_filename('students') in response['Content-Disposition']
    sheet = load_workbook(BytesIO(response.content)).active
    rows = list(sheet.iter_rows(values_only=True))
    assert rows[0][:2] == ('Registration number', 'Last name')
    assert ('R-002', 'Ndiaye', 'Moussa', '2016-09-12', '-', 'CM1') in rows


def test_class_export_counts_students(client, sign_in, school):
    sign_in('admin')
    sheet = load_workbook(BytesIO(client.get('/classes/export/').content)).active
    rows = list(sheet.iter_rows(values_only=True))
    assert ('CM1', 'French', 2, 'Sow Fatou') in rows


# ── Users ─────────────────────────────────────────────────────────────────────

def test_superadmin_cannot_delete_self(client, sign_in):
    me = sign_in('superadmin')

    response = client.post(f'/users/{me["id"]}/delete/', follow=True)

    assert 'You cannot delete your own account.' in response.content.decode()
    assert repository.users.get(me['id']) is not None


def test_superadmin_creates_user_with_hashed_password(client, sign_in):
    sign_in('superadmin')

    client.post('/users/new/', {'username': 'clerk', 'password': 'pw-123', 'role': 'user'})

    clerk = repository.users.find_by_username('clerk')
    assert clerk['role'] == 'user'
    assert clerk['password'] != 'pw-123'


# ── Expenses ──────────────────────────────────────────────────────────────────

def test_expense_records_who_logged_it(client, sign_in):
    me = sign_in('admin')

    client.post('/expenses/new/', {
        'date': '2026-04-01', 'amount': '12000', 'category': 'salary', 'description': 'April salary',
    })

    expense = repository.expenses.get_all()[0]
    assert expense['user_id'] == me['id']
    assert expense['amount'] == 12000
    assert 'admin-account' in client.get('/expenses/').content.decode()


def test_unknown_page_uses_custom_404(client, sign_in, settings):
    settings.DEBUG = False
    response = client.get('/no-such-page/')
    assert response.status_code == 404


# ── Role-dependent controls ───────────────────────────────────────────────────

MUTATION_LINKS = ('/new/"', '/edit/"', '/delete/"')


def _listed_pages(school):
    repository.expenses.add({
        'date': '2026-04-01', 'amount': 3000, 'category': 'water', 'description': 'Water bill',
    })
    return ['/students/', '/teachers/', '/classes/', f'/classes/{school["cm1_fr"]}/', '/expenses/']


def test_user_role_sees_no_mutation_controls(client, sign_in, school):
    sign_in('user')

    for url in _listed_pages(school):
        body = client.get(url).content.decode()
        assert not [link for link in MUTATION_LINKS if link in body], url


def test_admin_sees_edit_and_delete_controls(client, sign_in, school):
    sign_in('admin')

    for url in _listed_pages(school):
        body = client.get(url).content.decode()
        assert '/edit/"' in body and '/delete/"' in body, url


def test_exports_are_sorted_like_the_lists(school):
    repository.students.add({'registration_number': 'R-003', 'last_name': 'Ba', 'first_name': 'Ami'})
    repository.teachers.add({'registration_number': 'T-002', 'last_name': 'Kane', 'first_name': 'Omar'})
    state = load_state()

    assert [row['Last name'] for row in exports.student_rows(state)] == ['Ba', 'Diallo', 'Ndiaye']
    assert [row['Last name'] for row in exports.teacher_rows(state)] == ['Kane', 'Sow']
    assert [(row['Name'], row['Type']) for row in exports.class_rows(state)] == [
        ('CM1', 'Arabic'), ('CM1', 'French'), ('PS', 'French'),
    ]


def test_teacher_export_ignores_a_class_of_the_wrong_type(school):
    repository.teachers.update(school['teacher'], {'arabic_class_id': school['cm1_fr']})

    row = exports.teacher_rows(load_state())[0]

    assert row['Arabic class'] == '-'
    assert row['French class'] == 'CM1'

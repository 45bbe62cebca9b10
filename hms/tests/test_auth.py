import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from hms.models import ActivityLog, User

pytestmark = pytest.mark.django_db


def login(client, username, password):
    return client.post(reverse('login_view'), {'username': username, 'password': password}, format='json')


def test_login_returns_jwt_and_legacy_token(make_user):
    make_user('nurse', username='nurse1')
    r = login(APIClient(), 'nurse1', 'P@ssw0rd1')
    assert r.status_code == 200
    assert r.data['token'] and r.data['jwt_access'] and r.data['jwt_refresh']
    assert r.data['user']['role'] == 'nurse'
    assert ActivityLog.objects.filter(action='LOGIN', user__username='nurse1').exists()


def test_login_wrong_password_is_rejected_and_logged(make_user):
    make_user('nurse', username='nurse1')
    r = login(APIClient(), 'nurse1', 'wrong')
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert ActivityLog.objects.filter(action='LOGIN', user__isnull=True).count() == 1


def test_role_in_login_body_is_ignored(make_user):
    u = make_user('receptionist', username='desk')
    r = APIClient().post(reverse('login_view'),
                         {'username': 'desk', 'password': 'P@ssw0rd1', 'role': 'admin'}, format='json')
    assert r.status_code == 200
    assert r.data['role'] == 'receptionist'
    u.refresh_from_db()
    assert u.role == 'receptionist'


def test_token_header_authenticates(make_user):
    make_user('admin', username='boss')
    client = APIClient()
    token = login(client, 'boss', 'P@ssw0rd1').data['token']
    client.credentials(HTTP_AUTHORIZATION=f'Token {token}')
    r = client.get(reverse('user_profile'))
    assert r.status_code == 200
    assert r.data['user']['username'] == 'boss'


def test_jwt_bearer_authenticates_and_refresh(make_user):
    make_user('admin', username='boss')
    client = APIClient()
    tokens = login(client, 'boss', 'P@ssw0rd1').data
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['jwt_access']}")
    assert client.get(reverse('user_profile')).status_code == 200

    r = APIClient().post(reverse('jwt_refresh'), {'refresh': tokens['jwt_refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['jwt_access']


def test_logout_blacklists_refresh_token(make_user):
    make_user('admin', username='boss')
    client = APIClient()
    tokens = login(client, 'boss', 'P@ssw0rd1').data
    client.credentials(HTTP_AUTHORIZATION=f"Token {tokens['token']}")
    r = client.post(reverse('jwt_logout'), {'refresh': tokens['jwt_refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 1
    r = APIClient().post(reverse('jwt_refresh'), {'refresh': tokens['jwt_refresh']}, format='json')
    assert r.status_code == 401


def test_profile_includes_doctor_id(doctor):
    client = APIClient()
    client.force_authenticate(user=doctor.user)
    r = client.get(reverse('user_profile'))
    assert r.data['user']['doctorId'] == doctor.id


def test_unauthenticated_requests_get_401():
    r = APIClient().get(reverse('patients'))
    assert r.status_code == 401
    assert r.data['ok'] is False


def test_healthz_is_public():
    r = APIClient().get('/healthz')
    assert r.status_code == 200
    assert r.json()['db'] is True


@pytest.mark.parametrize('role,method,url,expected', [
    ('pharmacist', 'get', 'patients', 200),
    ('pharmacist', 'post', 'patients', 403),
    ('accountant', 'get', 'appointments', 403),
    ('nurse', 'get', 'appointments', 200),
    ('nurse', 'post', 'appointments', 403),
    ('receptionist', 'get', 'wards', 403),
    ('doctor', 'get', 'wards', 200),
    ('nurse', 'get', 'drugs', 403),
    ('pharmacist', 'get', 'drugs', 200),
    ('receptionist', 'get', 'billing', 403),
    ('accountant', 'get', 'billing', 200),
    ('doctor', 'get', 'admin_overview', 403),
    ('lab_technician', 'get', 'dashboard', 200),
])
def test_route_guard(client_for, role, method, url, expected):
    client = client_for(role)
    if method == 'get':
        r = client.get(reverse(url))
    else:
        r = client.post(reverse(url), {}, format='json')
    assert r.status_code == expected
    if expected == 403:
        assert r.data['error']['code'] == 'permission_denied'


def test_admin_passes_every_section(admin_client):
    for name in ('patients', 'appointments', 'doctors', 'wards', 'beds', 'admissions', 'drugs',
                 'billing', 'admin_overview', 'admin_activity'):
        assert admin_client.get(reverse(name)).status_code == 200, name


def test_route_guard_table_from_settings(client_for, settings):
    settings.ROLE_ROUTES = {'/api/drugs': {'read': ['nurse'], 'write': []}}
    assert client_for('nurse').get(reverse('drugs')).status_code == 200
    assert client_for('pharmacist').get(reverse('drugs')).status_code == 403
    # unlisted sections are open to any signed-in user
    assert client_for('pharmacist').get(reverse('billing')).status_code == 200


def test_superuser_flag_does_not_bypass_roles(make_user):
    user = make_user('receptionist', is_superuser=True)
    client = APIClient()
    client.force_authenticate(user=user)
    assert client.get(reverse('drugs')).status_code == 403
    assert User.objects.get(id=user.id).role == 'receptionist'


def test_route_guard_under_script_prefix(client_for):
    pharmacist = client_for('pharmacist')
    assert pharmacist.get(reverse('billing'), SCRIPT_NAME='/hms').status_code == 403
    assert pharmacist.get(reverse('drugs'), SCRIPT_NAME='/hms').status_code == 200

import pytest
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory

from utils.context import RequestContext, get_request_context, get_current_actor_id, resolve_actor_id
from utils.middleware import ActorContextMiddleware


def test_middleware_sets_and_clears_actor(registrar):
    seen = {}

    def view(request):
        seen['actor'] = get_current_actor_id()
        seen['ip'] = get_request_context()['ip_address']
        return 'ok'

    request = RequestFactory().get('/fees/', HTTP_X_FORWARDED_FOR='10.0.0.5, 172.16.0.1')
    request.user = registrar

    assert ActorContextMiddleware(view)(request) == 'ok'
    assert seen == {'actor': str(registrar.pk), 'ip': '10.0.0.5'}
    assert get_request_context() is None


def test_middleware_ignores_anonymous_users():
    seen = {}

    def view(request):
        seen['actor'] = get_current_actor_id()
        return 'ok'

    request = RequestFactory().get('/')
    request.user = AnonymousUser()
    ActorContextMiddleware(view)(request)

    assert seen['actor'] is None


def test_middleware_clears_context_when_view_fails():
    def view(request):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        ActorContextMiddleware(view)(RequestFactory().get('/'))
    assert get_request_context() is None


def test_explicit_actor_wins_over_context(registrar):
    with RequestContext(user=registrar):
        assert resolve_actor_id() == str(registrar.pk)
        assert resolve_actor_id('cashier-7') == 'cashier-7'
    assert resolve_actor_id() is None

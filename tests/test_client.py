"""TrackerClient session lifecycle and the per-module views, against the real app."""
from datetime import datetime, timezone

import httpx
import pytest

from tracker.client import ApiError, AuthenticationRequired, Session, TrackerClient
from tracker.schemas.progress import ModuleKey
from tracker.views import DrStrangeView, GrootView, SpidermanView, StarkView, open_view


@pytest.fixture()
def api(client):
    return TrackerClient(http=client)


@pytest.fixture()
def peter(api):
    api.signup("peter", "p@x.com", "webslinger")
    return api


class TestSession:
    def test_signup_starts_session(self, api):
        session = api.signup("peter", "p@x.com", "webslinger")
        assert isinstance(session, Session)
        assert api.session == session
        assert api.profile()["id"] == session.user_id

    def test_login_starts_session(self, peter):
        user_id = peter.session.user_id
        peter.sign_out()
        session = peter.login("p@x.com", "webslinger")
        assert session.user_id == user_id

    def test_failed_login_raises_and_leaves_no_session(self, peter):
        peter.sign_out()
        with pytest.raises(ApiError) as exc:
            peter.login("peter", "wrong-password")
        assert exc.value.status_code == 401
        assert exc.value.message == "Invalid credentials"
        assert peter.session is None

    def test_token_rejected_while_starting_session(self):
        def server(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/login":
                return httpx.Response(200, json={"token": "revoked"})
            return httpx.Response(401, json={"error": "Invalid or expired token"})

        http = httpx.Client(base_url="http://tracker.test", transport=httpx.MockTransport(server))
        api = TrackerClient(http=http)
        with pytest.raises(AuthenticationRequired) as exc:
            api.login("peter", "webslinger")
        assert exc.value.status_code == 401
        assert api.session is None
        http.close()

    def test_sign_out_discards_session(self, peter):
        peter.sign_out()
        assert not peter.authenticated
        with pytest.raises(AuthenticationRequired):
            peter.get_progress("groot")

    def test_rejected_token_clears_session(self, peter):
        peter.session = Session(token="expired-or-forged", user_id=peter.session.user_id)
        with pytest.raises(AuthenticationRequired) as exc:
            peter.get_progress(ModuleKey.STARK)
        assert exc.value.status_code == 401
        assert peter.session is None

    def test_invalid_document_is_api_error_and_keeps_session(self, peter):
        with pytest.raises(ApiError) as exc:
            peter.save_progress("groot", {"level": "high"})
        assert exc.value.status_code == 400
        assert peter.authenticated

    def test_save_returns_stored_document(self, peter):
        stored = peter.save_progress("groot", {"level": 4, "score": 1500, "achievements": []})
        assert stored == {"level": 4, "score": 1500, "achievements": []}
        assert peter.get_progress("groot") == stored


class TestViews:
    def test_groot_challenge_then_save(self, peter):
        view = GrootView.open(peter)
        assert (view.level, view.score, view.achievements) == (1, 0, [])

        view.complete_challenge()
        assert view.state == {"level": 2, "score": 500, "achievements": ["Milestone 2"]}
        view.save()

        reopened = open_view(peter, "groot")
        assert reopened.state == {"level": 2, "score": 500, "achievements": ["Milestone 2"]}

    def test_unsaved_changes_are_not_persisted(self, peter):
        view = GrootView.open(peter)
        view.complete_challenge()
        assert GrootView.open(peter).level == 1

    def test_stark_dashboard_alerts_and_reports(self, peter):
        view = StarkView.open(peter)
        view.configure_dashboard(theme="dark")
        view.add_alert({"text": "Suit breach"})
        view.add_report({"quarter": "Q3"})
        view.save()

        assert peter.get_progress("stark") == {
            "dashboardConfig": {"theme": "dark"},
            "alerts": [{"text": "Suit breach"}],
            "reports": [{"quarter": "Q3"}],
        }

    def test_spiderman_add_mission(self, peter):
        view = SpidermanView.open(peter)
        view.add_mission(date=datetime(2025, 10, 19, 12, 0, tzinfo=timezone.utc))
        view.set_calendar_pref("view", "week")
        stored = view.save()

        assert stored == {
            "missions": [{"name": "New Mission", "date": "2025-10-19T12:00:00.000Z"}],
            "calendarPrefs": {"view": "week"},
        }

    def test_drstrange_spellbook_and_search(self, peter):
        view = DrStrangeView.open(peter)
        view.add_spellbook()
        view.record_search("eye of agamotto")
        view.save()

        assert open_view(peter, ModuleKey.DRSTRANGE).state == {
            "spellbooks": [{"title": "New Spell", "power": "🔥"}],
            "searchHistory": ["eye of agamotto"],
        }

    def test_navigation_order(self, peter):
        assert GrootView(peter).next_module is ModuleKey.STARK
        assert StarkView(peter).next_module is ModuleKey.SPIDERMAN
        assert SpidermanView(peter).next_module is ModuleKey.DRSTRANGE
        assert DrStrangeView(peter).next_module is None

    def test_view_needs_session(self, api):
        with pytest.raises(AuthenticationRequired):
            GrootView.open(api)

from unittest import TestCase
from unittest.mock import Mock

from gmtbot_client import ApiClient, ApiError, EntityCache


def _response(status_code=200, body=None):
    resp = Mock(status_code=status_code, text="")
    resp.json.return_value = body
    return resp


class EntityCacheTests(TestCase):
    def test_get_fetches_once(self):
        fetch = Mock(side_effect=lambda key: {"id": key, "v": 1})
        cache = EntityCache(fetch)
        cache.get(1)
        cache.get(1)
        fetch.assert_called_once_with(1)

    def test_refetch_goes_back_to_server(self):
        versions = iter([{"id": 1, "name": "a"}, {"id": 1, "name": "b"}])
        cache = EntityCache(lambda key: next(versions))
        self.assertEqual(cache.get(1)["name"], "a")
        self.assertEqual(cache.refetch(1)["name"], "b")

    def test_all_refreshes_after_mutation(self):
        lists = iter([[{"id": 1}], [{"id": 2}, {"id": 1}]])
        cache = EntityCache(Mock(), lambda: next(lists))
        self.assertEqual([e["id"] for e in cache.all()], [1])
        cache.after_mutation(2)
        self.assertEqual([e["id"] for e in cache.all()], [2, 1])

    def test_invalidate_everything(self):
        cache = EntityCache(lambda key: {"id": key})
        cache.get(1)
        cache.get(2)
        cache.invalidate()
        self.assertEqual(len(cache), 0)


class ApiClientTests(TestCase):
    def setUp(self):
        self.http = Mock()
        self.client = ApiClient("http://api.test/", http=self.http)

    def test_login_stores_token_and_sends_it(self):
        self.http.request.side_effect = [
            _response(body={"token": "t0k", "user": {"id": 1}}),
            _response(body=[]),
        ]
        self.client.login("a@example.com", "pw")
        self.client.sessions()

        method, url = self.http.request.call_args.args
        self.assertEqual((method, url), ("GET", "http://api.test/api/sessions/"))
        self.assertEqual(self.http.request.call_args.kwargs["headers"]["Authorization"], "Bearer t0k")

    def test_error_body_becomes_api_error(self):
        self.http.request.return_value = _response(status_code=404, body={"error": "Session not found"})
        with self.assertRaises(ApiError) as ctx:
            self.client.session(5)
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.message, "Session not found")

    def test_rename_refetches_instead_of_patching(self):
        self.http.request.side_effect = [
            _response(body={"id": 3, "name": "Old", "messages": []}),
            _response(body={"id": 3, "name": "New", "messages": []}),
            _response(body={"id": 3, "name": "New (server)", "messages": []}),
        ]
        self.assertEqual(self.client.session(3)["name"], "Old")
        renamed = self.client.rename_session(3, "New")
        self.assertEqual(renamed["name"], "New (server)")
        self.assertEqual(self.client.session(3)["name"], "New (server)")

    def test_send_turn_without_session_reports_not_sent(self):
        created = {"id": 9, "name": "New Chat", "messages": []}
        self.http.request.side_effect = [
            _response(status_code=201, body={"sent": False, "session": created}),
            _response(body=created),
        ]
        result = self.client.send_turn("hello")
        self.assertFalse(result["sent"])
        self.assertIn(9, self.client.session_cache)
        self.assertEqual(self.http.request.call_args_list[0].kwargs["json"], {"content": "hello"})

    def test_delete_drops_cached_session(self):
        self.http.request.side_effect = [
            _response(body={"id": 4, "name": "x", "messages": []}),
            _response(body={"success": True}),
        ]
        self.client.session(4)
        self.client.delete_session(4)
        self.assertNotIn(4, self.client.session_cache)

    def test_group_turn_invalidates_roster(self):
        self.http.request.side_effect = [
            _response(body=[{"id": 1, "name": "Team", "last_session": None}]),
            _response(body={"asked_bot": True, "session": {"id": 7, "messages": []}}),
            _response(body=[{"id": 1, "name": "Team", "last_session": {"id": 7}}]),
        ]
        self.assertIsNone(self.client.groups()[0]["last_session"])
        self.client.send_group_turn(1, 7, "hi bot", ask_bot=True)
        self.assertEqual(self.client.groups()[0]["last_session"], {"id": 7})
        self.assertEqual(self.http.request.call_args_list[1].kwargs["json"], {"content": "hi bot", "ask_bot": True})

"""Tests for the AI gateway prioritization adapter."""

import json
from datetime import datetime
from unittest.mock import MagicMock

import pytest
import requests

from tasktriage.adapters.ai_gateway import (
    AIGatewayPrioritizer,
    PrioritizationError,
    QuotaExceededError,
    RateLimitError,
    TaskSuggestion,
    validate_scores,
)
from tasktriage.config import Config
from tasktriage.core.tasks import Task


@pytest.fixture
def config():
    return Config(ai_api_key="sk-test", ai_gateway_url="https://gateway.test/v1/chat", ai_model="test-model")


@pytest.fixture
def tasks():
    created = datetime(2025, 1, 14, 9, 0)
    return [
        Task(id="a", title="Write report", created_at=created, deadline=datetime(2025, 1, 16, 17, 0)),
        Task(id="b", title="Go running", created_at=created, category="health"),
    ]


def response(status=200, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    resp.json.return_value = payload
    return resp


def tool_call_payload(arguments: dict) -> dict:
    return {
        "choices": [
            {"message": {"tool_calls": [{"function": {"name": "x", "arguments": json.dumps(arguments)}}]}}
        ]
    }


def make_adapter(config, resp):
    session = MagicMock()
    session.post.return_value = resp
    return AIGatewayPrioritizer(config, session=session), session


class TestPrioritize:
    def test_reads_tool_call_arguments(self, config, tasks):
        adapter, session = make_adapter(config, response(payload=tool_call_payload({"priorities": {"a": 0.9, "b": 0.3}})))

        assert adapter.prioritize(tasks) == {"a": 0.9, "b": 0.3}

        session.post.assert_called_once()
        url = session.post.call_args[0][0]
        kwargs = session.post.call_args[1]
        assert url == "https://gateway.test/v1/chat"
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
        body = kwargs["json"]
        assert body["model"] == "test-model"
        assert body["tool_choice"]["function"]["name"] == "set_task_priorities"
        assert '"id": "a"' in body["messages"][1]["content"]

    def test_falls_back_to_message_content(self, config, tasks):
        payload = {"choices": [{"message": {"content": json.dumps({"a": 1, "b": 0})}}]}
        adapter, _ = make_adapter(config, response(payload=payload))
        assert adapter.prioritize(tasks) == {"a": 1.0, "b": 0.0}

    def test_ignores_unknown_ids(self, config, tasks):
        adapter, _ = make_adapter(config, response(payload=tool_call_payload({"priorities": {"a": 0.5, "zzz": 0.7}})))
        assert adapter.prioritize(tasks) == {"a": 0.5}

    def test_rejects_out_of_range_scores(self, config, tasks):
        adapter, _ = make_adapter(config, response(payload=tool_call_payload({"priorities": {"a": 1.7}})))
        with pytest.raises(PrioritizationError, match="Invalid priority"):
            adapter.prioritize(tasks)

    def test_rate_limit(self, config, tasks):
        adapter, _ = make_adapter(config, response(status=429))
        with pytest.raises(RateLimitError):
            adapter.prioritize(tasks)

    def test_quota_exhausted(self, config, tasks):
        adapter, _ = make_adapter(config, response(status=402))
        with pytest.raises(QuotaExceededError):
            adapter.prioritize(tasks)

    def test_server_error(self, config, tasks):
        adapter, _ = make_adapter(config, response(status=500, text="boom"))
        with pytest.raises(PrioritizationError, match="500"):
            adapter.prioritize(tasks)

    def test_malformed_payload(self, config, tasks):
        adapter, _ = make_adapter(config, response(payload={"choices": []}))
        with pytest.raises(PrioritizationError, match="Unexpected AI response"):
            adapter.prioritize(tasks)

    def test_network_failure(self, config, tasks):
        adapter, session = make_adapter(config, None)
        session.post.side_effect = requests.ConnectionError("unreachable")
        with pytest.raises(PrioritizationError, match="unreachable"):
            adapter.prioritize(tasks)

    def test_missing_api_key(self, tasks):
        adapter, session = make_adapter(Config(ai_api_key=""), response())
        with pytest.raises(PrioritizationError, match="API key"):
            adapter.prioritize(tasks)
        session.post.assert_not_called()

    def test_no_tasks_skips_request(self, config):
        adapter, session = make_adapter(config, response())
        assert adapter.prioritize([]) == {}
        session.post.assert_not_called()


class TestSuggest:
    def test_parses_suggestions(self, config, tasks):
        payload = tool_call_payload(
            {
                "suggestions": [
                    {"title": "Plan the week", "priority": "high", "category": "work"},
                    {"priority": "low"},
                    {"title": "Stretch", "priority": "low", "category": "health"},
                ]
            }
        )
        adapter, session = make_adapter(config, response(payload=payload))

        assert adapter.suggest(tasks) == [
            TaskSuggestion("Plan the week", "high", "work"),
            TaskSuggestion("Stretch", "low", "health"),
        ]
        assert session.post.call_args[1]["json"]["tool_choice"]["function"]["name"] == "suggest_tasks"


class TestValidateScores:
    def test_rejects_non_mapping(self):
        with pytest.raises(PrioritizationError):
            validate_scores([0.5], {"a"})

    def test_rejects_booleans(self):
        with pytest.raises(PrioritizationError):
            validate_scores({"a": True}, {"a"})

#!/usr/bin/env python3
"""Test suite for the AutoGen-backed research collaborators."""

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from autogen_ext.models.replay import ReplayChatCompletionClient

from agents.autogen_services import AutoGenResearchServices
from agents.config import ResearchConfig
from agents.intent_agent import IntentAgent, parse_intent
from agents.llm import parse_string_list
from agents.mcp_client import MCPRPCError, MCPServerConfig, MCPToolClient
from agents.planner_agent import PlannerAgent
from agents.research_evaluator_agent import ResearchEvaluatorAgent, parse_evaluation
from agents.research_orchestrator import ResearchOrchestrator
from agents.search_agent import SearchAgent, format_results, simplify_results
from agents.services import INTENT_OPTIONS
from mcp_servers.local_tavily_server import handle_rpc
from research_state_manager import PreviousSearch, UserIntent

TAVILY_RESPONSE = {
    "results": [
        {"title": "NREL chart", "url": "https://nrel.gov/chart", "content": "Record cell efficiency is 47.6%."},
        {"title": "Review", "content": "Perovskite tandems are improving."},
    ]
}


def fake_tool_client(response=None):
    client = mock.MagicMock()
    client.call_tool.return_value = TAVILY_RESPONSE if response is None else response
    return client


class TestParsing(unittest.TestCase):
    def test_parse_string_list_json(self):
        self.assertEqual(parse_string_list('["a", " b ", ""]'), ["a", "b"])

    def test_parse_string_list_fenced(self):
        self.assertEqual(parse_string_list('```json\n["a", "b"]\n```'), ["a", "b"])

    def test_parse_string_list_bullets(self):
        self.assertEqual(parse_string_list("1. First step\n- Second step\n\n"), ["First step", "Second step"])

    def test_parse_intent(self):
        self.assertEqual(parse_intent("exit", INTENT_OPTIONS), UserIntent.EXIT)
        self.assertEqual(parse_intent('"Confirm".', INTENT_OPTIONS), UserIntent.CONFIRM)
        self.assertEqual(parse_intent('{"intent": "exit"}', INTENT_OPTIONS), UserIntent.EXIT)
        self.assertEqual(parse_intent("no idea", INTENT_OPTIONS), UserIntent.UPDATE)

    def test_parse_evaluation(self):
        verdict = parse_evaluation('Verdict:\n{"is_good": true, "reasoning": "Complete and cited."}')
        self.assertTrue(verdict.is_good)
        self.assertEqual(verdict.reasoning, "Complete and cited.")

    def test_parse_evaluation_invalid_is_rejection(self):
        verdict = parse_evaluation("Looks fine to me")
        self.assertFalse(verdict.is_good)
        self.assertEqual(verdict.reasoning, "Looks fine to me")

    def test_simplify_and_format_results(self):
        results = simplify_results(TAVILY_RESPONSE)
        self.assertEqual(results[1], {"title": "Review", "content": "Perovskite tandems are improving.", "url": ""})
        text = format_results("solar", results)
        self.assertTrue(text.startswith("Query: solar\n"))
        self.assertIn("- NREL chart (https://nrel.gov/chart): Record cell efficiency is 47.6%.", text)
        self.assertEqual(format_results("solar", []), "Query: solar\nNo results found.")

    def test_simplify_unwraps_wrapped_tool_result(self):
        results = simplify_results({"result": [{"title": "T", "url": "u", "content": "useful fact"}]})
        self.assertEqual(results, [{"title": "T", "content": "useful fact", "url": "u"}])

    def test_simplify_keeps_answer_only_response(self):
        results = simplify_results({"answer": "the answer", "results": []})
        self.assertEqual(results, [{"title": "Answer", "content": "the answer", "url": ""}])
        self.assertIn("the answer", format_results("q", results))

    def test_simplify_falls_back_to_whole_object(self):
        results = simplify_results({"title": "Solo", "content": "only entry"})
        self.assertEqual(results, [{"title": "Solo", "content": "only entry", "url": ""}])
        self.assertEqual(simplify_results({"results": []}), [])

    def test_parse_intent_prefers_json_intent_field(self):
        verdict = '{"intent": "exit", "alternatives": ["confirm"]}'
        self.assertEqual(parse_intent(verdict, INTENT_OPTIONS), UserIntent.EXIT)
        self.assertEqual(parse_intent('```json\n{"intent": "Update"}\n```', INTENT_OPTIONS), UserIntent.UPDATE)


class TestAgents(unittest.IsolatedAsyncioTestCase):
    async def test_planner_generate(self):
        planner = PlannerAgent(model_client=ReplayChatCompletionClient(['["History", "Current tech"]']))
        self.assertEqual(await planner.generate("solar"), ["History", "Current tech"])

    async def test_planner_falls_back_to_topic(self):
        planner = PlannerAgent(model_client=ReplayChatCompletionClient(["   "]))
        self.assertEqual(await planner.generate("solar"), ["solar"])

    async def test_planner_revise_keeps_plan_on_empty_output(self):
        planner = PlannerAgent(model_client=ReplayChatCompletionClient([""]))
        self.assertEqual(await planner.revise("solar", ["A", "B"], feedback="shorter"), ["A", "B"])

    async def test_intent_shortcuts_skip_the_model(self):
        intent = IntentAgent(model_client=ReplayChatCompletionClient([]))
        self.assertEqual(await intent.select(INTENT_OPTIONS, ""), UserIntent.CONFIRM)
        self.assertEqual(await intent.select(INTENT_OPTIONS, " Exit "), UserIntent.EXIT)

    async def test_intent_classifies_free_text(self):
        intent = IntentAgent(model_client=ReplayChatCompletionClient(["update"]))
        self.assertEqual(await intent.select(INTENT_OPTIONS, "Add a step about costs"), UserIntent.UPDATE)

    async def test_evaluator(self):
        evaluator = ResearchEvaluatorAgent(
            model_client=ReplayChatCompletionClient(['{"is_good": false, "reasoning": "No sources."}'])
        )
        verdict = await evaluator.evaluate("Why?", "Because.")
        self.assertFalse(verdict.is_good)
        self.assertEqual(verdict.reasoning, "No sources.")

    async def test_evaluator_rejects_empty_answer(self):
        evaluator = ResearchEvaluatorAgent(model_client=ReplayChatCompletionClient([]))
        verdict = await evaluator.evaluate("Why?", "  ")
        self.assertFalse(verdict.is_good)

    async def test_search_uses_query_without_history(self):
        tool = fake_tool_client()
        agent = SearchAgent(tool_client=tool, model_client=ReplayChatCompletionClient([]), max_results=1)

        text = await agent.search("solar efficiency", [])

        tool.call_tool.assert_called_once_with(
            query="solar efficiency", max_results=1, include_raw_content=False
        )
        self.assertIn("NREL chart", text)
        self.assertNotIn("Review", text)

    async def test_search_refines_query_after_rejections(self):
        tool = fake_tool_client()
        agent = SearchAgent(
            tool_client=tool,
            model_client=ReplayChatCompletionClient(['"record solar cell efficiency NREL"']),
        )

        text = await agent.search("solar efficiency", [PreviousSearch("solar efficiency", "too vague")])

        self.assertEqual(tool.call_tool.call_args.kwargs["query"], "record solar cell efficiency NREL")
        self.assertTrue(text.startswith("Query: record solar cell efficiency NREL"))

    async def test_search_reads_wrapped_tool_result(self):
        tool = fake_tool_client({"result": [{"title": "T", "url": "u", "content": "useful fact"}]})
        agent = SearchAgent(tool_client=tool)

        text = await agent.search("solar efficiency", [])

        self.assertEqual(text, "Query: solar efficiency\n- T (u): useful fact")


class TestAutoGenResearchServices(unittest.IsolatedAsyncioTestCase):
    def test_builds_agents_over_production_client(self):
        config = ResearchConfig(interaction_log=False)
        with mock.patch.dict("os.environ", {"OPENAI_API_KEY": "sk-test"}):
            services = AutoGenResearchServices(config, tool_client=fake_tool_client())
        self.assertEqual(services.current_plan, [])

    def test_missing_api_key_is_reported(self):
        with mock.patch.dict("os.environ", {}, clear=True):
            with self.assertRaises(EnvironmentError):
                AutoGenResearchServices(ResearchConfig(), tool_client=fake_tool_client())

    async def test_services_drive_full_workflow(self):
        model_client = ReplayChatCompletionClient(
            [
                '["History"]',
                "Solar cells date to 1954 [NREL chart].",
                '{"is_good": true, "reasoning": "Cited."}',
                "FINAL REPORT",
            ]
        )
        shown = []
        with tempfile.TemporaryDirectory() as tmp:
            config = ResearchConfig(output_dir=Path(tmp), interaction_log=False)
            services = AutoGenResearchServices(
                config,
                model_client=model_client,
                tool_client=fake_tool_client(),
                read_feedback=lambda prompt: "confirm",
                show=shown.append,
            )

            outcome = await ResearchOrchestrator(services, config=config).run("solar panel efficiency", "p1")

            self.assertEqual(outcome.report, "FINAL REPORT")
            answers = (Path(tmp) / "p1_research_answers.md").read_text()
            self.assertIn("## History\n\nSolar cells date to 1954 [NREL chart].\n\n", answers)
        self.assertIn("  1. History", shown[0])


class TestMCPToolClient(unittest.TestCase):
    def _response(self, payload, status=200):
        response = mock.MagicMock()
        response.status_code = status
        response.json.return_value = payload
        return response

    def _client(self, *responses):
        session = mock.MagicMock()
        session.headers = {}
        session.post.side_effect = list(responses)
        config = MCPServerConfig(base_url="http://mcp.test/mcp/", api_key="secret", tool_name="tavily.search")
        return MCPToolClient(config=config, session=session), session

    def test_call_tool_fetches_catalogue_once(self):
        catalogue = self._response({"jsonrpc": "2.0", "result": {"tools": [{"name": "tavily.search"}]}})
        client, session = self._client(
            catalogue,
            self._response({"jsonrpc": "2.0", "result": TAVILY_RESPONSE}),
            self._response({"jsonrpc": "2.0", "result": ["raw"]}),
        )

        self.assertEqual(client.call_tool(query="solar"), TAVILY_RESPONSE)
        self.assertEqual(client.call_tool(query="wind"), {"result": ["raw"]})

        self.assertEqual(session.post.call_count, 3)
        url = session.post.call_args_list[1].args[0]
        payload = session.post.call_args_list[1].kwargs["json"]
        self.assertEqual(url, "http://mcp.test/mcp")
        self.assertEqual(payload["method"], "call_tool")
        self.assertEqual(payload["params"], {"name": "tavily.search", "arguments": {"query": "solar"}})
        self.assertEqual(session.headers["Authorization"], "Bearer secret")

    def test_rpc_error_raises(self):
        client, _ = self._client(
            self._response({"jsonrpc": "2.0", "error": {"code": -32602, "message": "bad query"}})
        )
        with self.assertRaises(MCPRPCError) as ctx:
            client.list_tools()
        self.assertEqual(ctx.exception.code, -32602)


class TestLocalTavilyServer(unittest.TestCase):
    def test_list_tools(self):
        response = handle_rpc({"id": 1, "method": "list_tools"}, mock.MagicMock())
        self.assertEqual(response["result"]["tools"][0]["name"], "tavily.search")

    def test_call_tool_filters_arguments(self):
        tavily = mock.MagicMock()
        tavily.search.return_value = TAVILY_RESPONSE
        request = {
            "id": "x",
            "method": "call_tool",
            "params": {"name": "tavily.search", "arguments": {"query": "solar", "max_results": 2, "bogus": 1}},
        }

        response = handle_rpc(request, tavily)

        tavily.search.assert_called_once_with(query="solar", max_results=2)
        self.assertEqual(json.loads(json.dumps(response))["result"], TAVILY_RESPONSE)

    def test_errors(self):
        tavily = mock.MagicMock()
        self.assertEqual(handle_rpc({"id": 1, "method": "nope"}, tavily)["error"]["code"], -32601)
        missing = {"id": 2, "method": "call_tool", "params": {"name": "tavily.search", "arguments": {}}}
        self.assertEqual(handle_rpc(missing, tavily)["error"]["code"], -32602)
        tavily.search.assert_not_called()


if __name__ == "__main__":
    unittest.main()

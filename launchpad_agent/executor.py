"""Agent loop: request, run tools, feed results back, repeat."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .api_base import APIProtocol
from .cancellation import CancellationToken
from .data_structures import Message, Response, ToolResultContent, Usage
from .errors import IterationLimitExceededError
from .sandbox import validate
from .tools.base import Tool
from .tools.registry import ToolRegistry

__all__ = ["AgentResult", "BASE_SYSTEM_PROMPT", "MAX_ITERATIONS", "run_agent"]

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 10

BASE_SYSTEM_PROMPT = """\
You are an AI assistant integrated into Launchpad, a Micro-SaaS shipping framework.
You help developers build and ship products using a structured SOP (Standard Operating Procedure) system.

Your capabilities:
- Search and read files in linked project directories
- Analyze codebases to understand architecture and patterns
- Track progress through the SOP pipeline (13 phases from Idea to Launch)
- Provide guidance on tech stack decisions (Next.js, Tailwind, Clerk, Neon, Drizzle, Stripe, Vercel)
- Help with code reviews, architecture decisions, and best practices

You have access to file tools to explore and read project files. When the user asks about code, features, or wants you to find something, USE THE TOOLS to search and read the actual files. Don't just make assumptions - look at the code.

Be concise, technical, and action-oriented. When you identify actionable items, be specific about what needs to be done."""


@dataclass
class AgentResult:
    """Outcome of a finished agent loop.

    messages is the full transcript, including the tool turns appended by the
    loop but not the final assistant answer.
    """

    text: str
    iterations: int
    messages: list[Message] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)


def build_system_prompt(
    project_path: str | None = None, system_prompt: str | None = None
) -> str:
    """Base prompt plus project path, else the caller's prompt, else the base."""
    if project_path is not None:
        return f"{BASE_SYSTEM_PROMPT}\n\nCurrent project path: {project_path}"
    if system_prompt is not None:
        return system_prompt
    return BASE_SYSTEM_PROMPT


async def _request(
    api: APIProtocol,
    messages: Sequence[Message],
    tools: Sequence[Tool] | None,
    system: str,
    cancel_token: CancellationToken | None,
) -> Response:
    if cancel_token is not None:
        cancel_token.raise_if_cancelled()
        return await cancel_token.run(api.send(messages, tools=tools, system=system))
    return await api.send(messages, tools=tools, system=system)


async def run_agent(
    api: APIProtocol,
    messages: Sequence[Message],
    project_path: str | None = None,
    system_prompt: str | None = None,
    max_iterations: int = MAX_ITERATIONS,
    cancel_token: CancellationToken | None = None,
    extra_denied: Iterable[str] = (),
) -> AgentResult:
    """Run the conversation until the model produces a final answer.

    Args:
        api: Model client
        messages: Prior transcript, oldest first; not modified
        project_path: Directory the tools are confined to. Tools are offered
            to the model only when this is given.
        system_prompt: Replaces the base prompt when no project is bound
        max_iterations: Ceiling on model requests for this call
        cancel_token: Optional token checked before every request and tool batch
        extra_denied: Denylist segments added to the platform list for this run

    Returns:
        AgentResult with the final text, request count, transcript and usage

    Raises:
        FileToolError: project_path fails validation
        TransportError, APIError, ParseError: a request failed; no retry
        IterationLimitExceededError: the model was still calling tools when the
            ceiling was reached
        AgentCancelledError: the token was cancelled
    """
    # Unbound calls still dispatch, against the denylist only.
    denied = tuple(extra_denied)
    registry = ToolRegistry(extra_denied=denied)
    offer_tools = False
    root_text: str | None = None
    if project_path is not None:
        root = validate(project_path, extra_denied=denied)
        registry = ToolRegistry(root=root, extra_denied=denied)
        offer_tools = True
        root_text = str(root)
    system = build_system_prompt(root_text, system_prompt)

    transcript = list(messages)
    usage = Usage()

    for iteration in range(1, max_iterations + 1):
        logger.debug(
            "Agent iteration %d: %d messages in transcript", iteration, len(transcript)
        )
        response = await _request(
            api,
            tuple(transcript),
            registry.tools if offer_tools else None,
            system,
            cancel_token,
        )
        usage = usage + response.usage

        tool_calls = response.get_tool_use()
        if response.stop_reason != "tool_use" or not tool_calls:
            logger.debug(
                "Final answer after %d request(s), stop_reason=%s",
                iteration,
                response.stop_reason,
            )
            return AgentResult(
                text=response.get_text(),
                iterations=iteration,
                messages=transcript,
                usage=usage,
            )

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        results: list[ToolResultContent] = []
        for call in tool_calls:
            results.append(await registry.execute(call))

        transcript.append(Message.assistant(response.content))
        transcript.append(Message.user(results))

    logger.warning("Stopped after %d requests without a final answer", max_iterations)
    raise IterationLimitExceededError(max_iterations)

"""
LangGraph Agent State Definition.

This module defines the state structure that flows through the agent's graph.
"""

from typing import TypedDict, Annotated, Sequence
from langchain_core.messages import BaseMessage
from operator import add


class AgentState(TypedDict):
    """
    State that flows through the LangGraph workflow.

    The `Annotated[Sequence[BaseMessage], add]` type means:
    - This field contains a sequence of messages
    - When a node returns new messages, they are ADDED to existing ones
    - This is controlled by the `add` reducer from the operator module

    Attributes:
        messages: Conversation so far plus this turn's AI and tool messages
        tool_output: Content of the last tool result (if any)
        iteration_count: Number of think steps taken (prevents infinite loops)
        should_continue: Whether the agent should think again after a tool ran
    """

    messages: Annotated[Sequence[BaseMessage], add]

    tool_output: str | None

    iteration_count: int

    should_continue: bool

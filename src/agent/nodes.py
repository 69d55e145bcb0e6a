"""
LangGraph Node Functions.

Each node takes the current state and returns updates to that state. Nodes
that need a model or the tool registry receive them as arguments; the graph
binds them when it is built.

- think_node: LLM decides what to do (call tools or answer)
- act_node: Execute the requested tools
- observe_node: Decide whether to think again
- respond_node: Make sure the turn ends with an answer
"""

import json
import logging

from langchain_core.messages import AIMessage, SystemMessage, ToolMessage
from src.agent.state import AgentState
from src.tools.registry import ToolRegistry


logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are a virtual assistant specialized in answering frequently asked questions based on a predefined list. Your goal is to give direct, accurate answers only for the questions in that list.

Behavior rules:
- If the user greets you, always reply with an appropriate greeting.
- Use the find_faq tool to look up the list whenever the user asks a question.
- If the user's question matches or is similar to one of the questions in the list, give the corresponding answer.
- If an answer contains an image link, use the describe_image tool to understand the image before answering.
- If the question is not in the list or is not recognized, reply with: "Sorry, I don't know the answer to that question."
- Do not invent answers or extrapolate beyond what is in the list.
- When needed, rephrase the answer for clarity, but without changing its meaning.
"""


def think_node(state: AgentState, llm) -> dict:
    """
    THINK Node: The LLM analyzes the conversation and decides what to do.

    The LLM either calls one or more tools (via function calling) or
    answers the user directly. The system prompt is injected when the
    conversation does not start with one.

    Args:
        state: Current agent state with conversation history
        llm: Chat model with the registry's tools bound

    Returns:
        dict: State updates (new message, incremented iteration count)
    """
    messages = list(state["messages"])

    if messages and not isinstance(messages[0], SystemMessage):
        messages = [SystemMessage(content=SYSTEM_PROMPT)] + messages

    response = llm.invoke(messages)

    return {
        "messages": [response],
        "iteration_count": state["iteration_count"] + 1,
    }


def act_node(state: AgentState, registry: ToolRegistry) -> dict:
    """
    ACT Node: Execute every tool call requested by the LLM.

    Error Handling:
    --------------
    A failing tool does not abort the turn. The failure is returned as a
    ToolMessage with status "error" and a JSON body naming the exception,
    so the LLM can see it and answer accordingly.

    Args:
        state: Current agent state
        registry: Tools available to the agent

    Returns:
        dict: State updates with one ToolMessage per tool call
    """
    last_message = state["messages"][-1]
    tool_messages = []

    for tool_call in last_message.tool_calls:
        try:
            result = registry.execute_tool(
                tool_name=tool_call["name"],
                tool_input=tool_call["args"]
            )
            content = result if isinstance(result, str) else json.dumps(result, ensure_ascii=False)
            tool_message = ToolMessage(content=content, tool_call_id=tool_call["id"])
        except Exception as e:
            logger.warning("Tool %s failed: %s", tool_call["name"], e)
            tool_message = ToolMessage(
                content=json.dumps({"error": type(e).__name__, "message": str(e)}, ensure_ascii=False),
                tool_call_id=tool_call["id"],
                status="error",
            )
        tool_messages.append(tool_message)

    return {
        "messages": tool_messages,
        "tool_output": tool_messages[-1].content if tool_messages else None,
    }


def observe_node(state: AgentState, max_iterations: int) -> dict:
    """
    OBSERVE Node: Decide whether the LLM gets to think again.

    After tools ran the LLM needs another step to use their results; the
    iteration limit stops runaway tool loops.

    Args:
        state: Current agent state with tool execution results
        max_iterations: Maximum number of think steps per turn

    Returns:
        dict: State updates with should_continue flag
    """
    return {"should_continue": state["iteration_count"] < max_iterations}


def respond_node(state: AgentState, llm) -> dict:
    """
    RESPOND Node: Make sure the turn ends with an assistant answer.

    Normally think_node already produced the answer and this is a
    pass-through. When the iteration limit cut a tool loop short, the LLM
    is asked once more, without tools, to answer from what it has.

    Args:
        state: Current agent state
        llm: Chat model without tools

    Returns:
        dict: Empty dict, or the final answer message
    """
    last_message = state["messages"][-1]

    if isinstance(last_message, AIMessage) and not last_message.tool_calls:
        return {}

    messages = list(state["messages"])
    if messages and not isinstance(messages[0], SystemMessage):
        messages = [SystemMessage(content=SYSTEM_PROMPT)] + messages

    return {"messages": [llm.invoke(messages)]}

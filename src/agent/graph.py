"""
LangGraph Workflow Definition.

This module creates the agent's state machine (graph) that defines how
the agent thinks, calls tools, and responds, and the per-turn entry point
used by the chat driver.

Workflow:
START → THINK → (tool?) → ACT → OBSERVE → (continue?) → THINK/RESPOND → END
"""

from langgraph.graph import StateGraph, END
from langchain_core.messages import HumanMessage
from src.agent.state import AgentState
from src.agent.nodes import think_node, act_node, observe_node, respond_node
from src.memory.conversation import Conversation
from src.tools.registry import ToolRegistry


def should_use_tool(state: AgentState) -> str:
    """
    Decision function: Does the LLM want to use a tool?

    Args:
        state: Current agent state

    Returns:
        str: "use_tool" if tool requested, "respond" otherwise
    """
    last_message = state["messages"][-1]

    if getattr(last_message, "tool_calls", None):
        return "use_tool"

    return "respond"


def should_continue_thinking(state: AgentState) -> str:
    """
    Decision function: Should the agent reason again after a tool ran?

    Args:
        state: Current agent state

    Returns:
        str: "continue" to keep thinking, "finish" to respond
    """
    if state.get("should_continue", False):
        return "continue"

    return "finish"


def create_agent_graph(llm, registry: ToolRegistry, max_iterations: int = 3):
    """
    Create the LangGraph workflow for the agent.

    Workflow Flow:
    -------------
    1. START → think
    2. think → act when tools were requested, otherwise → respond
    3. act → observe
    4. observe → think while under max_iterations, otherwise → respond
    5. respond → END

    Args:
        llm: Chat model supporting tool calling
        registry: Tools the model may call
        max_iterations: Maximum number of think steps per turn

    Returns:
        CompiledGraph: The compiled LangGraph workflow ready to execute
    """
    llm_with_tools = llm.bind_tools(registry.get_tool_schemas())

    graph = StateGraph(AgentState)

    graph.add_node("think", lambda state: think_node(state, llm_with_tools))
    graph.add_node("act", lambda state: act_node(state, registry))
    graph.add_node("observe", lambda state: observe_node(state, max_iterations))
    graph.add_node("respond", lambda state: respond_node(state, llm))

    graph.set_entry_point("think")

    graph.add_conditional_edges(
        "think",
        should_use_tool,
        {
            "use_tool": "act",
            "respond": "respond"
        }
    )

    graph.add_edge("act", "observe")

    graph.add_conditional_edges(
        "observe",
        should_continue_thinking,
        {
            "continue": "think",
            "finish": "respond"
        }
    )

    graph.add_edge("respond", END)

    return graph.compile()


def run_turn(agent, conversation: Conversation, user_input: str) -> str:
    """
    Process one user turn.

    Runs the agent over the conversation plus the new user message. Only
    when the run succeeds are the user and assistant turns appended, so a
    failed turn leaves the conversation unchanged.

    Args:
        agent: Compiled agent graph
        conversation: The session's conversation, updated in place
        user_input: The user's message

    Returns:
        str: The assistant's reply
    """
    final_state = agent.invoke({
        "messages": conversation.messages + [HumanMessage(content=user_input)],
        "tool_output": None,
        "iteration_count": 0,
        "should_continue": False,
    })

    reply = final_state["messages"][-1].content
    if not isinstance(reply, str):
        reply = str(reply)

    conversation.add_user(user_input)
    conversation.add_assistant(reply)
    return reply

"""
Tool Registry System.

This module provides the dispatch table of tools the agent can call: tool
name -> handler, argument schema and natural-language description. The
agent binds the schemas to the chat model and executes calls by name.

To add a new tool:
1. Write the handler and a pydantic args schema
2. Wrap it with StructuredTool.from_function in build_tool_registry()
3. Register it with registry.register(your_tool)
"""

from typing import Dict, List
from pydantic import BaseModel, Field
from langchain_core.tools import BaseTool, StructuredTool

from src.tools.faq_matcher import FaqMatcher
from src.tools.image_describer import ImageDescriber


FIND_FAQ_DESCRIPTION = (
    "Returns the frequently asked questions most similar to the given question, "
    "together with their answers. The question parameter is required: only call "
    "this tool when the user has supplied an explicit question!"
)

DESCRIBE_IMAGE_DESCRIPTION = (
    "Describes the content of an image. Call it whenever you have a link to an "
    "image (sometimes the link is in an FAQ answer, sometimes in the user's "
    "question). Some answers to the user's doubts are given through an image; "
    "in those cases this description helps build your reply."
)


class FindFaqInput(BaseModel):
    question: str = Field(description="The user's question, as asked")


class DescribeImageInput(BaseModel):
    image_url: str = Field(description="Link to the image: http(s) URL, file:// URI or local path")


class ToolRegistry:
    """
    Registry of agent tools.

    Keeps tools by name and executes them by name. Arguments are validated
    by each tool's args schema before the handler runs.
    """

    def __init__(self):
        """Initialize an empty tool registry."""
        self._tools: Dict[str, BaseTool] = {}

    def __contains__(self, tool_name: str) -> bool:
        return tool_name in self._tools

    def register(self, tool: BaseTool):
        """
        Register a tool in the registry.

        Args:
            tool: A LangChain tool

        Raises:
            ValueError: If a tool with the same name is already registered
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def get_tool_schemas(self) -> List[BaseTool]:
        """
        Get all tools for LLM binding.

        Returns:
            list: Tool objects ready for .bind_tools()
        """
        return list(self._tools.values())

    def execute_tool(self, tool_name: str, tool_input: dict):
        """
        Execute a tool by name.

        Args:
            tool_name: Name of the tool to execute
            tool_input: Dictionary of tool parameters

        Returns:
            The handler's plain result

        Raises:
            ValueError: If tool_name is not registered
            pydantic.ValidationError: If tool_input does not match the schema
        """
        if tool_name not in self._tools:
            raise ValueError(f"Unknown tool: {tool_name}")

        tool = self._tools[tool_name]
        return tool.invoke(tool_input)


def build_tool_registry(faq_matcher: FaqMatcher, image_describer: ImageDescriber) -> ToolRegistry:
    """
    Create the registry with the FAQ and image tools.

    Args:
        faq_matcher: Seeded (or lazily seeding) FAQ matcher
        image_describer: Image describer, initialized before first use

    Returns:
        ToolRegistry: Registry holding find_faq and describe_image
    """

    def find_faq(question: str) -> List[dict]:
        return [faq.model_dump() for faq in faq_matcher.find_faq(question)]

    def describe_image(image_url: str) -> str:
        return image_describer.describe(image_url)

    registry = ToolRegistry()
    registry.register(StructuredTool.from_function(
        func=find_faq,
        name="find_faq",
        description=FIND_FAQ_DESCRIPTION,
        args_schema=FindFaqInput,
    ))
    registry.register(StructuredTool.from_function(
        func=describe_image,
        name="describe_image",
        description=DESCRIBE_IMAGE_DESCRIPTION,
        args_schema=DescribeImageInput,
    ))
    return registry

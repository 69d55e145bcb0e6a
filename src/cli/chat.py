"""
Terminal-based Chat Interface.

This module provides the command-line interface for talking to the FAQ
assistant, using Rich for formatting and prompt_toolkit for input.

Features:
- Rich formatted output (colors, panels, markdown)
- Command history (up/down arrow keys)
- Ends at end of input (Ctrl+D) or on Ctrl+C
"""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from src.agent.graph import run_turn
from src.memory.conversation import Conversation


class ChatCLI:
    """
    Terminal-based chat interface for the FAQ assistant.

    The CLI owns no conversation state of its own: the Conversation it is
    given is passed to every turn.
    """

    def __init__(self, agent_graph, conversation: Conversation, console: Console | None = None,
                 session: PromptSession | None = None):
        """
        Initialize the chat CLI.

        Args:
            agent_graph: Compiled LangGraph agent
            conversation: Conversation for this session
            console: Rich console, a new one by default
            session: Prompt session, one with file history by default
        """
        self.console = console or Console()
        self.agent = agent_graph
        self.conversation = conversation

        # History is saved to .chat_history file in the current directory
        self.session = session or PromptSession(
            history=FileHistory('.chat_history')
        )

    def print_welcome(self):
        """Display welcome message."""
        welcome_text = Text()
        welcome_text.append("FAQ Assistant\n", style="bold blue")
        welcome_text.append("Powered by LangGraph + Ollama\n\n", style="dim")
        welcome_text.append("Ask a question and press Enter.\n")
        welcome_text.append("Ctrl+D or Ctrl+C ends the session.\n")

        self.console.print(Panel(welcome_text, border_style="blue"))

    def print_agent_message(self, message: str):
        """
        Display agent response with markdown formatting.

        Args:
            message: Agent's response message
        """
        self.console.print("\n[bold green]Assistant:[/bold green]")
        self.console.print(Markdown(message))

    def print_thinking(self):
        """Display thinking indicator."""
        self.console.print("[dim]Assistant is thinking...[/dim]")

    def print_error(self, error: str):
        """
        Display error message.

        Args:
            error: Error message to display
        """
        self.console.print(f"\n[bold red]Error:[/bold red] {error}")

    def handle_input(self, user_input: str):
        """
        Run one turn for a line of user input and display the reply.

        Blank input is ignored.
        """
        if not user_input.strip():
            return

        self.print_thinking()
        reply = run_turn(self.agent, self.conversation, user_input)
        self.conversation.flush()
        self.print_agent_message(reply)

    def run(self):
        """
        Main chat loop.

        Runs until end of input (Ctrl+D) or Ctrl+C. Errors from a turn are
        displayed and the loop continues.
        """
        self.print_welcome()
        self.console.print("Chat ready!")

        while True:
            try:
                user_input = self.session.prompt("\nYou: ")
            except (EOFError, KeyboardInterrupt):
                self.console.print("\n[bold blue]Goodbye![/bold blue]\n")
                break

            try:
                self.handle_input(user_input)
            except KeyboardInterrupt:
                self.console.print("\n[bold yellow]Interrupted[/bold yellow]")
            except Exception as e:
                self.print_error(str(e))

"""
Conversation state with optional persistent transcript.

A Conversation is the ordered list of system/user/assistant turns for one
chat session. It is created by the chat driver and handed explicitly to
every turn; nothing here is global. Turns only ever get appended.

When a transcript directory is given, turns are also written to disk in
JSONL format (JSON Lines), one file per session, so sessions can be
reviewed later.
"""

import json
from pathlib import Path
from datetime import datetime
from typing import List, Optional
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage


class Conversation:
    """
    Ordered chat transcript for one session.

    Design Decisions:
    - Only system, user and assistant turns are kept; tool traffic from the
      agent graph stays inside the graph run
    - JSONL format: appendable without loading the entire file
    - Write buffering: turns are written to disk on flush()
    """

    def __init__(self, system_prompt: Optional[str] = None, transcript_dir: Optional[Path] = None):
        """
        Initialize the conversation.

        Args:
            system_prompt: Optional first (system) turn
            transcript_dir: Base directory for transcripts, None disables them
        """
        self._messages: List[BaseMessage] = []
        self.session_file: Optional[Path] = None
        self.message_buffer: List[dict] = []

        if transcript_dir is not None:
            history_dir = Path(transcript_dir) / "chat_history"
            history_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.session_file = history_dir / f"session_{timestamp}.jsonl"
            self.session_file.touch()

        if system_prompt:
            self._append(SystemMessage(content=system_prompt))

    @property
    def messages(self) -> List[BaseMessage]:
        """A copy of the turns, oldest first."""
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def add_user(self, content: str) -> HumanMessage:
        """Append a user turn."""
        message = HumanMessage(content=content)
        self._append(message)
        return message

    def add_assistant(self, content: str) -> AIMessage:
        """Append an assistant turn."""
        message = AIMessage(content=content)
        self._append(message)
        return message

    def _append(self, message: BaseMessage):
        self._messages.append(message)

        if self.session_file is not None:
            self.message_buffer.append({
                "timestamp": datetime.now().isoformat(),
                "role": _role(message),
                "content": message.content,
            })

    def flush(self):
        """
        Write buffered turns to the session file.

        Does nothing when transcripts are disabled.
        """
        if not self.session_file or not self.message_buffer:
            return

        with open(self.session_file, 'a', encoding='utf-8') as f:
            for message_dict in self.message_buffer:
                f.write(json.dumps(message_dict, ensure_ascii=False) + '\n')

        self.message_buffer.clear()


def _role(message: BaseMessage) -> str:
    if isinstance(message, SystemMessage):
        return "system"
    if isinstance(message, HumanMessage):
        return "user"
    return "assistant"

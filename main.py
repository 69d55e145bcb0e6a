#!/usr/bin/env python3
"""
FAQ Assistant - Main Entry Point

This is the entry point for the FAQ assistant. It prepares the local
models, seeds the FAQ vector store, registers the tools and starts the
chat interface.

Usage:
    python main.py

Requirements:
    - Ollama must be running locally (default: http://localhost:11434)
    - Models are pulled on start unless PULL_MODELS=false

Environment Variables:
    See src/config/settings.py for configuration options
"""

import httpx
from rich.console import Console

from src.agent.graph import create_agent_graph
from src.agent.nodes import SYSTEM_PROMPT
from src.cli.chat import ChatCLI
from src.cli.models import prepare_model, pull_progress
from src.config.logging import setup_logging
from src.config.settings import get_settings
from src.llm.ollama_client import get_embeddings, get_llm, get_vision_llm
from src.memory.conversation import Conversation
from src.memory.vector_store import FaqCollection, create_client
from src.tools.faq_matcher import FaqMatcher
from src.tools.image_describer import ImageDescriber
from src.tools.registry import build_tool_registry


def main():
    """
    Initialize and run the FAQ assistant.

    Steps:
    1. Load configuration and set up logging
    2. Pull the chat and embedding models and show their information
    3. Seed the FAQ collection
    4. Prepare the vision model for the image tool
    5. Build the tool registry and the LangGraph agent
    6. Start the terminal chat interface
    """
    settings = get_settings()
    setup_logging(settings.log_level)
    console = Console()

    console.print("Initializing FAQ Assistant...")
    console.print(f"LLM: {settings.ollama_model} @ {settings.ollama_base_url}")
    console.print()

    if settings.pull_models:
        prepare_model(console, settings.ollama_model)
        prepare_model(console, settings.ollama_embedding_model)

    faq_matcher = FaqMatcher(
        collection=FaqCollection(
            create_client(),
            name=settings.faq_collection,
            dimensions=settings.embedding_dimensions,
        ),
        embeddings=get_embeddings(),
        seed_path=settings.faq_path,
        question_threshold=settings.faq_question_threshold,
        question_top_k=settings.faq_question_top_k,
        response_threshold=settings.faq_response_threshold,
        response_top_k=settings.faq_response_top_k,
        seed_workers=settings.seed_workers,
    )
    faq_matcher.ensure_seeded()

    with httpx.Client(timeout=settings.image_fetch_timeout, follow_redirects=True) as http_client:
        image_describer = ImageDescriber(http_client, model=settings.ollama_vision_model)
        if settings.pull_models:
            with pull_progress(console) as on_progress:
                image_describer.initialize(on_progress=on_progress)
        else:
            image_describer.initialize(llm=get_vision_llm())

        registry = build_tool_registry(faq_matcher, image_describer)
        agent = create_agent_graph(get_llm(), registry, max_iterations=settings.max_iterations)

        conversation = Conversation(
            system_prompt=SYSTEM_PROMPT,
            transcript_dir=settings.data_dir if settings.save_transcripts else None,
        )
        if conversation.session_file:
            console.print(f"Transcript: {conversation.session_file}")

        cli = ChatCLI(agent, conversation, console=console)
        cli.run()

        conversation.flush()
        if conversation.session_file:
            console.print("Session saved.")


if __name__ == "__main__":
    main()

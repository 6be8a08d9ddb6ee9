#!/usr/bin/env python3
"""
Interactive CLI demo for Turn Router.

Chats with the small-talk dialog, or with the knowledge-base dialog when
TURN_ROUTER_KB_ID and TURN_ROUTER_SUBSCRIPTION_KEY are set.
"""
import logging
import os

from dotenv import load_dotenv

from turn_router import LookupFailure, NoMatchError, TurnRouterApp, load_config_from_env

# Load environment variables
load_dotenv()


def print_banner(dialog_name: str):
    """Print welcome banner."""
    print("\n" + "=" * 60)
    print("  Turn Router - Interactive CLI Demo")
    print("=" * 60)
    print(f"\nDialog: {dialog_name}")
    print("\nType 'quit' or 'exit' to end the session.")
    print("-" * 60 + "\n")


def print_responses(responses):
    """Print formatted responses."""
    for response in responses:
        print(f"🤖 {response.text}")
        for attachment in response.attachments:
            label = attachment.name or attachment.content_url
            print(f"📎 {attachment.content_type}: {label}")
    print("-" * 60)


def main():
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING"))

    config = load_config_from_env()
    app = TurnRouterApp(config)
    app.initialize()

    print_banner("knowledge base" if config.has_knowledge_base else "common responses")

    try:
        while True:
            try:
                message = input("You: ").strip()
            except (EOFError, KeyboardInterrupt):
                print()
                break

            if message.lower() in {"quit", "exit"}:
                break
            if not message:
                continue

            try:
                print_responses(app.chat(message, session_id="cli"))
            except LookupFailure as e:
                print(f"⚠️  Knowledge base unavailable: {e}")
            except NoMatchError as e:
                print(f"⚠️  {e}")
    finally:
        app.close()

    print("Goodbye!")


if __name__ == "__main__":
    main()

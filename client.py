"""
Client script for the Portfolio RAG API.

Demonstrates how to interact with the FastAPI endpoints.
"""

import sys
from typing import Any, Dict

import requests


class RAGAPIClient:
    """Client for interacting with the Portfolio RAG API."""

    def __init__(self, base_url: str = "http://localhost:10000", timeout: float = 120.0):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the RAG API
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()

    def health_check(self) -> Dict[str, Any]:
        """Check API health."""
        response = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def chat(self, question: str) -> str:
        """
        Ask a question.

        Error responses carry a user-facing message in ``answer`` too, so it
        is returned whatever the status code.
        """
        response = self.session.post(
            f"{self.base_url}/api/chat",
            json={"question": question},
            timeout=self.timeout
        )
        return response.json()["answer"]

    def reload_system(self) -> Dict[str, Any]:
        """Rebuild the knowledge base."""
        response = self.session.post(f"{self.base_url}/system/reload", timeout=self.timeout)
        response.raise_for_status()
        return response.json()


def interactive_mode(base_url: str = "http://localhost:10000") -> None:
    """Interactive question loop."""
    client = RAGAPIClient(base_url)

    print("🎯 Portfolio RAG - Interactive Mode")
    print("Type 'quit' to exit, 'health' for the knowledge base state")
    print("=" * 50)

    while True:
        try:
            question = input("\n❓ Your question: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n👋 Goodbye!")
            break

        if question.lower() in ['quit', 'exit', 'q']:
            print("👋 Goodbye!")
            break
        if not question:
            continue

        try:
            if question.lower() == 'health':
                health = client.health_check()
                print(f"📊 {health['state']} ({health['documents']} documents, {health['passages']} passages)")
            else:
                print(f"💡 {client.chat(question)}")
        except requests.RequestException as e:
            print(f"❌ Error: {str(e)}")


if __name__ == "__main__":
    interactive_mode(sys.argv[1] if len(sys.argv) > 1 else "http://localhost:10000")

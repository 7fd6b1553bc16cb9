"""LLM provider adapters used by the location extractor.

Three concrete implementations of ILLMProvider
(georesolve/interfaces/llm_provider.py):
    - OpenAILLMProvider    -- gpt-4o-mini, or any OpenAI-compatible endpoint
    - AnthropicLLMProvider -- Claude Haiku
    - OllamaLLMProvider    -- local models via an Ollama server

main.py picks the first one with credentials (OpenAI, then Anthropic,
then Ollama).
"""

from georesolve.providers.llm.anthropic_provider import AnthropicLLMProvider
from georesolve.providers.llm.ollama_provider import OllamaLLMProvider
from georesolve.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["OpenAILLMProvider", "AnthropicLLMProvider", "OllamaLLMProvider"]

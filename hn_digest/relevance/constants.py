"""Signal table and thresholds for relevance scoring."""

from hn_digest.relevance.models import Signal, SignalTier


# Minimum score for a story to count as relevant
RELEVANCE_THRESHOLD: int = 10

# Scores are capped here
MAX_SCORE: int = 100

# Accumulated strong-tier points at which evaluation stops
STRONG_DECISIVE_SCORE: int = 30

# Phrases this short are prone to substring false positives
# ("ai" in "said", "ml" in "html"), so they only match whole words.
SHORT_PHRASE_MAX_LENGTH: int = 4

_STRONG = (
    "openai",
    "chatgpt",
    "gpt-4",
    "gpt-4o",
    "gpt-5",
    "anthropic",
    "claude",
    "gemini",
    "deepmind",
    "mistral",
    "llama",
    "perplexity",
    "midjourney",
    "dall-e",
    "stable diffusion",
    "sora",
    "github copilot",
    "hugging face",
    "huggingface",
    "deepseek",
    "large language model",
    "generative ai",
    "gen ai",
    "artificial intelligence",
    "cursor ai",
)

_MEDIUM = (
    "llm",
    "ai agent",
    "ai tool",
    "ai model",
    "ai assistant",
    "ai coding",
    "copilot",
    "chatbot",
    "machine learning",
    "deep learning",
    "neural network",
    "transformer model",
    "multimodal",
    "reasoning model",
    "autonomous agent",
    "diffusion model",
)

_WEAK = (
    "ai",
    "ml",
    "agi",
    "gpt",
    "nlp",
    "rag",
    "agents",
    "inference",
    "fine-tuning",
)

DEFAULT_SIGNALS: tuple[Signal, ...] = (
    *(Signal(phrase, SignalTier.STRONG) for phrase in _STRONG),
    *(Signal(phrase, SignalTier.MEDIUM) for phrase in _MEDIUM),
    *(Signal(phrase, SignalTier.WEAK) for phrase in _WEAK),
)

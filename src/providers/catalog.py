"""Built-in provider catalog, in the order the settings UI lists them."""

from .base import ProviderDescriptor

PROVIDERS: tuple = (
    ProviderDescriptor(
        id="openai",
        name="OpenAI",
        base_url="https://api.openai.com/v1",
        default_model="gpt-3.5-turbo",
        available_models=(
            "gpt-3.5-turbo",
            "gpt-3.5-turbo-16k",
            "gpt-4",
            "gpt-4-turbo",
            "gpt-4o",
            "gpt-4o-mini",
        ),
        api_key_format="sk-...",
        requires_api_key=True,
        max_tokens=4096,
        supports_streaming=True,
        description="Official OpenAI API. Requires API key from platform.openai.com",
        key_url="https://platform.openai.com/api-keys",
    ),
    # Native Anthropic endpoints do not speak the OpenAI shape; point
    # custom_base_url at an OpenAI-compatible proxy to use these models.
    ProviderDescriptor(
        id="anthropic",
        name="Anthropic (Claude)",
        base_url="https://api.anthropic.com/v1",
        default_model="claude-3-sonnet-20240229",
        available_models=(
            "claude-3-sonnet-20240229",
            "claude-3-opus-20240229",
            "claude-3-haiku-20240307",
            "claude-3-5-sonnet-20241022",
        ),
        api_key_format="sk-ant-...",
        requires_api_key=True,
        max_tokens=4096,
        supports_streaming=True,
        description="Claude models via Anthropic API. Requires API key from console.anthropic.com",
        key_url="https://console.anthropic.com/",
    ),
    ProviderDescriptor(
        id="groq",
        name="Groq",
        base_url="https://api.groq.com/openai/v1",
        default_model="mixtral-8x7b-32768",
        available_models=(
            "mixtral-8x7b-32768",
            "llama2-70b-4096",
            "gemma-7b-it",
            "llama3-8b-8192",
            "llama3-70b-8192",
        ),
        api_key_format="gsk_...",
        requires_api_key=True,
        max_tokens=8192,
        supports_streaming=True,
        description="Ultra-fast inference. Get API key from console.groq.com",
        key_url="https://console.groq.com/keys",
    ),
    ProviderDescriptor(
        id="together",
        name="Together AI",
        base_url="https://api.together.xyz/v1",
        default_model="meta-llama/Llama-2-70b-chat-hf",
        available_models=(
            "meta-llama/Llama-2-70b-chat-hf",
            "meta-llama/Llama-2-13b-chat-hf",
            "mistralai/Mixtral-8x7B-Instruct-v0.1",
            "NousResearch/Nous-Hermes-2-Mixtral-8x7B-DPO",
        ),
        api_key_format="...",
        requires_api_key=True,
        max_tokens=4096,
        supports_streaming=True,
        description="Open source models. Get API key from api.together.xyz",
        key_url="https://api.together.xyz/settings/api-keys",
    ),
    ProviderDescriptor(
        id="ollama",
        name="Ollama (Local)",
        base_url="http://localhost:11434/v1",
        default_model="llama2",
        available_models=(
            "llama2",
            "llama2:13b",
            "llama2:70b",
            "codellama",
            "mistral",
            "mixtral",
        ),
        api_key_format="no-key-required",
        requires_api_key=False,
        max_tokens=4096,
        supports_streaming=True,
        description="Run models locally. Install Ollama and start the service",
        key_url="https://ollama.ai/",
    ),
    ProviderDescriptor(
        id="perplexity",
        name="Perplexity AI",
        base_url="https://api.perplexity.ai",
        default_model="llama-3.1-sonar-small-128k-online",
        available_models=(
            "llama-3.1-sonar-small-128k-online",
            "llama-3.1-sonar-large-128k-online",
            "llama-3.1-sonar-huge-128k-online",
        ),
        api_key_format="pplx-...",
        requires_api_key=True,
        max_tokens=4096,
        supports_streaming=True,
        description="Search-enhanced models. Get API key from perplexity.ai",
        key_url="https://www.perplexity.ai/settings/api",
    ),
    ProviderDescriptor(
        id="gemini",
        name="Google Gemini",
        base_url="https://generativelanguage.googleapis.com/v1beta/openai",
        default_model="gemini-2.5-flash-lite",
        available_models=(
            "gemini-2.5-flash",
            "gemini-2.5-flash-lite",
            "gemini-2.5-pro",
        ),
        api_key_format="AIza...",
        requires_api_key=True,
        max_tokens=8192,
        supports_streaming=True,
        description="Google's multimodal AI. Get API key from Google AI Studio",
        key_url="https://aistudio.google.com/app/apikey",
    ),
)

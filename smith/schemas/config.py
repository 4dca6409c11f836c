# smith/schemas/config.py
"""
Pydantic schemas for the system configuration document.

The document is authored in camelCase (``defaultEngine``, ``apiKeyEnv``,
``promptFile``); the models expose snake_case attributes and accept either
spelling on input.
"""
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model mapping snake_case attributes to camelCase document keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProviderConfig(CamelModel):
    """Connection settings for one language-model backend.

    :ivar api_key_env: Name of the environment variable holding the API key.
    :vartype api_key_env: str
    :ivar model: Model identifier sent with every request.
    :vartype model: str
    :ivar endpoint: Full URL of the generation endpoint.
    :vartype endpoint: str
    """

    api_key_env: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    endpoint: str = Field(..., min_length=1)


class AgentConfig(CamelModel):
    """A named role bound to a prompt template and, optionally, a provider.

    :ivar enabled: Disabled agents cannot be selected for execution.
    :vartype enabled: bool
    :ivar prompt_file: Path to the agent's prompt template.
    :vartype prompt_file: str
    :ivar engine: Provider name overriding the system default.
    :vartype engine: Optional[str]
    """

    enabled: bool = False
    prompt_file: str = Field(..., min_length=1)
    engine: Optional[str] = None


class SystemConfig(CamelModel):
    """The whole ``agent.config.jsonc`` document."""

    default_engine: str = Field(..., min_length=1)
    providers: Dict[str, ProviderConfig]
    agents: Dict[str, AgentConfig]

    @field_validator("default_engine")
    @classmethod
    def _strip_engine(cls, value: str) -> str:
        return value.strip()

    def provider_for(self, agent: AgentConfig) -> str:
        """Returns the lower-cased provider name an agent should run on."""
        return (agent.engine or self.default_engine).strip().lower()

from pydantic import BaseModel, ConfigDict


class ModelArchitecture(BaseModel):
    """Static shape parameters of a model, taken from Ollama's verbose /api/show output."""
    model_config = ConfigDict(frozen=True)

    architecture: str = ""  # Architecture family, e.g. "llama"
    block_count: int = 0  # Number of transformer layers
    head_count: int = 0  # Attention heads
    head_count_kv: int = 0  # Key/value heads (GQA)
    embedding_length: int = 0
    context_length: int = 0  # Context ceiling declared by the model
    parameters: str = ""  # Newline-delimited "key value" runtime parameters

    def parameter_int(self, key: str) -> int:
        """Return an integer runtime parameter such as num_ctx, or 0 when absent."""
        for line in self.parameters.splitlines():
            parts = line.split()
            if len(parts) == 2 and parts[0] == key:
                try:
                    return int(parts[1])
                except ValueError:
                    return 0
        return 0

    @property
    def has_kv_geometry(self) -> bool:
        """True when every field needed to size the KV cache is known and positive."""
        return (
            self.block_count > 0
            and self.head_count_kv > 0
            and self.head_count > 0
            and self.embedding_length > 0
        )

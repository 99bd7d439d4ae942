"""Model format names accepted by ``--for`` options."""

from __future__ import annotations

from .errors import UserInputError

MODEL_FORMAT_NAMES: tuple[str, ...] = ("GGUF", "MLX", "SAFETENSORS", "ONNX")


def parse_model_format_names(value: str, separator: str = ",") -> list[str]:
    """Parse ``"gguf, mlx"`` into ``["GGUF", "MLX"]``.

    Matching is case-insensitive and duplicates are dropped. Raises
    UserInputError naming every invalid choice.
    """
    formats = [part.strip().upper() for part in value.split(separator)]
    invalid = [fmt for fmt in formats if fmt not in MODEL_FORMAT_NAMES]
    if invalid:
        plural = "s" if len(invalid) > 1 else ""
        raise UserInputError(
            f"Invalid choice{plural}: {', '.join(invalid)}. "
            f"Valid choices are: {', '.join(MODEL_FORMAT_NAMES)}"
        )
    return list(dict.fromkeys(formats))

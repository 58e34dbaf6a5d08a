from __future__ import annotations

import io
import logging
import math
from dataclasses import asdict, fields
from html import escape
from pathlib import Path
from string import Template
from typing import Mapping, Optional, Tuple

import numpy as np
from flask import Flask, jsonify, request
from PIL import Image, UnidentifiedImageError

from .config import SETTINGS, XRaySettings, configure_logging
from .infrastructure.cache import CACHE, cache_key
from .infrastructure.network import FETCHER
from .infrastructure.responses import encode_png, send_png
from .presets import PRESETS, get_preset
from .processing.buffer import PixelBuffer, mask_from_image
from .processing.pipeline import EffectParameters, apply_xray_effect

APP_VERSION = "1.0.0"

LOGGER = logging.getLogger(__name__)

CONTROL_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("shadows", "Shadows"),
    ("blacks", "Blacks"),
    ("highlights", "Highlights"),
    ("contrast", "Contrast"),
    ("clarity", "Clarity"),
    ("dehaze", "Dehaze"),
    ("denoise_color", "Color denoise"),
    ("denoise_luma", "Luma denoise"),
    ("sharpen", "Sharpen"),
    ("sharpen_masking", "Sharpen masking"),
)

_POSITIVE_SETTINGS = {"port", "max_render_size", "max_upload_mb", "timeout"}
_NON_NEGATIVE_SETTINGS = {"retries", "cache_ttl"}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _number(values: Mapping[str, str], name: str, default: float) -> float:
    raw = values.get(name)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name}: expected a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"{name}: expected a finite number")
    return value


def _unit(values: Mapping[str, str], name: str, default: float = 0.0) -> float:
    return max(0.0, min(1.0, _number(values, name, default)))


def _flag(values: Mapping[str, str], name: str, default: bool) -> bool:
    raw = values.get(name)
    if raw is None or str(raw).strip() == "":
        return default
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{name}: expected a boolean, got {raw!r}")


def _seed(values: Mapping[str, str]) -> Optional[int]:
    raw = values.get("seed")
    if raw is None or str(raw).strip() == "":
        return None
    try:
        seed = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"seed: expected an integer, got {raw!r}") from None
    if seed < 0:
        raise ValueError("seed: must be non-negative")
    return seed


def parse_effect_parameters(
    values: Mapping[str, str],
    dodge_mask: Optional[np.ndarray] = None,
    burn_mask: Optional[np.ndarray] = None,
) -> EffectParameters:
    """Build engine parameters from request values, clamping every control.

    Raises ``KeyError`` for an unknown preset and ``ValueError`` for values
    that are not numbers or booleans.
    """
    preset = get_preset((values.get("preset") or SETTINGS.default_preset).strip().lower())
    controls = {name: _unit(values, name) for name, _ in CONTROL_FIELDS}
    seed = _seed(values)
    return EffectParameters(
        preset=preset,
        thickness=_number(values, "thickness", SETTINGS.default_thickness),
        intensity=_unit(values, "intensity", SETTINGS.default_intensity),
        enable_noise=_flag(values, "noise", SETTINGS.enable_noise),
        dodge_mask=dodge_mask,
        burn_mask=burn_mask,
        rng=np.random.default_rng(seed) if seed is not None else None,
        **controls,
    )


def describe_parameters(params: EffectParameters, seed: Optional[int]) -> str:
    parts = [
        f"preset={params.preset.key.value}",
        f"thickness={params.thickness!r}",
        f"intensity={params.intensity!r}",
        f"noise={params.enable_noise}",
        f"seed={seed}",
    ]
    parts.extend(f"{name}={getattr(params, name)!r}" for name, _ in CONTROL_FIELDS)
    return "&".join(parts)


def fit_render_size(size: Tuple[int, int], max_size: int) -> Tuple[int, int]:
    """Scale ``size`` down so its longer side fits ``max_size``; never upscale."""
    width, height = size
    scale = min(max_size / max(width, height), 1.0)
    return max(1, int(width * scale)), max(1, int(height * scale))


def decode_image(data: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise ValueError(f"Unreadable image: {exc}") from None
    return img


def prepare_source(data: bytes, max_size: int) -> Image.Image:
    img = decode_image(data).convert("RGBA")
    target = fit_render_size(img.size, max_size)
    if target != img.size:
        img = img.resize(target, Image.Resampling.LANCZOS)
    return img


def resolve_source_url(args: Mapping[str, str]) -> str:
    return args.get("source_url") or SETTINGS.source_url


def render_xray(
    data: bytes,
    values: Mapping[str, str],
    masks: Optional[Mapping[str, bytes]] = None,
) -> bytes:
    """Decode, run the engine and encode; returns PNG bytes.

    Deterministic renders (noise off, or seeded) are served from the cache.
    """
    masks = masks or {}
    src = prepare_source(data, SETTINGS.max_render_size)
    mask_arrays = {
        name: mask_from_image(decode_image(raw), size=src.size) for name, raw in masks.items() if raw
    }
    params = parse_effect_parameters(
        values,
        dodge_mask=mask_arrays.get("dodge_mask"),
        burn_mask=mask_arrays.get("burn_mask"),
    )
    seed = _seed(values)

    key = None
    if not params.enable_noise or seed is not None:
        key = cache_key(
            [data, masks.get("dodge_mask", b""), masks.get("burn_mask", b""), describe_parameters(params, seed)]
        )
        cached = CACHE.get(key)
        if cached:
            LOGGER.debug("cache hit %s", key[:12])
            return cached

    LOGGER.info(
        "rendering %dx%d preset=%s thickness=%.2f intensity=%.2f",
        src.width,
        src.height,
        params.preset.key.value,
        params.thickness,
        params.intensity,
    )
    out = apply_xray_effect(PixelBuffer.from_image(src), params)
    png = encode_png(out.to_image())
    if key is not None:
        CACHE.put(key, png)
    return png


def _render_index() -> str:
    preset_options = "".join(
        f'<option value="{escape(p.key.value)}"'
        f'{" selected" if p.key.value == SETTINGS.default_preset else ""}>{escape(p.label)}</option>'
        for p in PRESETS.values()
    )

    sliders = [
        ("thickness", "Thickness", 0.0, 2.0, SETTINGS.default_thickness),
        ("intensity", "Intensity", 0.0, 1.0, SETTINGS.default_intensity),
    ] + [(name, label, 0.0, 1.0, 0.0) for name, label in CONTROL_FIELDS]

    controls_html = "".join(
        f'<div class="field">'
        f'<label class="field-label" for="{name}">{escape(label)}</label>'
        f'<input type="range" id="{name}" name="{name}" min="{lo}" max="{hi}" step="0.01" value="{value}">'
        f"</div>"
        for name, label, lo, hi, value in sliders
    )

    template_path = Path(__file__).parent / "templates" / "index.html"
    with open(template_path, "r", encoding="utf-8") as f:
        tmpl_str = f.read()

    return Template(tmpl_str).substitute(
        APP_VERSION=APP_VERSION,
        preset_options=preset_options,
        controls_html=controls_html,
        noise_checked="checked" if SETTINGS.enable_noise else "",
    )


def create_app() -> Flask:
    configure_logging()
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = SETTINGS.max_upload_mb * 1024 * 1024

    @app.route("/xray", methods=["GET", "POST"])
    def xray():
        try:
            if request.method == "POST":
                upload = request.files.get("image")
                if upload is None:
                    return ("Missing 'image' upload", 400)
                data = upload.read()
                masks = {
                    name: request.files[name].read()
                    for name in ("dodge_mask", "burn_mask")
                    if name in request.files
                }
                png = render_xray(data, request.form, masks)
            else:
                data = FETCHER.fetch_bytes(resolve_source_url(request.args))
                png = render_xray(data, request.args)
            return send_png(png)
        except KeyError as exc:
            return (str(exc.args[0]), 400)
        except ValueError as exc:
            return (str(exc), 400)
        except RuntimeError as exc:
            LOGGER.error("source fetch failed: %s", exc)
            return (f"Source Error: {exc}", 502)

    @app.route("/raw")
    def raw():
        try:
            data = FETCHER.fetch_bytes(resolve_source_url(request.args))
            img = prepare_source(data, SETTINGS.max_render_size)
            return send_png(encode_png(img))
        except ValueError as exc:
            return (str(exc), 400)
        except RuntimeError as exc:
            return (f"Source Error: {exc}", 502)

    @app.route("/presets")
    def presets():
        return jsonify(presets=[preset.to_dict() for preset in PRESETS.values()])

    @app.route("/health")
    def health():
        return jsonify(
            ok=True,
            version=APP_VERSION,
            default_preset=SETTINGS.default_preset,
            max_render_size=SETTINGS.max_render_size,
        )

    @app.route("/settings", methods=["GET", "PATCH"])
    def settings_view():
        if request.method == "GET":
            return jsonify(asdict(SETTINGS))

        payload = request.get_json(silent=True) or {}
        errors: dict[str, str] = {}
        applied: dict[str, object] = {}

        for field in fields(XRaySettings):
            if field.name not in payload:
                continue

            raw_value = payload[field.name]
            try:
                if field.type is bool:
                    coerced = _flag({field.name: raw_value}, field.name, False)
                elif field.type is int:
                    coerced = int(raw_value)
                elif field.type is float:
                    coerced = float(raw_value)
                else:
                    coerced = str(raw_value)
            except (TypeError, ValueError):
                errors[field.name] = f"Expected {field.type.__name__}"
                continue

            if field.name == "default_preset":
                coerced = str(coerced).lower()
                if coerced not in {key.value for key in PRESETS}:
                    errors[field.name] = f"Unknown preset {coerced!r}"
                    continue

            if field.name in _POSITIVE_SETTINGS and coerced <= 0:
                errors[field.name] = "Must be positive"
                continue
            if field.name in _NON_NEGATIVE_SETTINGS and coerced < 0:
                errors[field.name] = "Must not be negative"
                continue

            setattr(SETTINGS, field.name, coerced)
            applied[field.name] = coerced

        status = 400 if errors else 200
        return (
            jsonify(updated=applied, errors=errors, settings=asdict(SETTINGS)),
            status,
        )

    @app.route("/")
    def index():
        return _render_index()

    return app


# Module-level application for WSGI servers (``fabric_xray.app:app``).
app = create_app()
application = app

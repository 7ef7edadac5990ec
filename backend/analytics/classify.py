"""
File-type classification — pure functions only.

Maps a module or asset name onto the closed set of type tags used for
colouring and filtering. Matching is on the final extension,
case-insensitive, so "app.js.map" is a source map and not JavaScript.
"""
from __future__ import annotations

import posixpath

MODULE_TYPES = ("js", "css", "image", "font", "json", "wasm", "html", "map", "unknown")

_EXTENSIONS = {
    ".js":    "js",
    ".mjs":   "js",
    ".cjs":   "js",
    ".jsx":   "js",
    ".ts":    "js",
    ".tsx":   "js",
    ".css":   "css",
    ".scss":  "css",
    ".sass":  "css",
    ".less":  "css",
    ".png":   "image",
    ".jpg":   "image",
    ".jpeg":  "image",
    ".gif":   "image",
    ".svg":   "image",
    ".webp":  "image",
    ".ico":   "image",
    ".woff":  "font",
    ".woff2": "font",
    ".ttf":   "font",
    ".otf":   "font",
    ".eot":   "font",
    ".json":  "json",
    ".wasm":  "wasm",
    ".html":  "html",
    ".htm":   "html",
    ".map":   "map",
}


def classify(name) -> str:
    """Return the type tag for a file name; "unknown" when nothing matches."""
    if not isinstance(name, str):
        return "unknown"
    _, ext = posixpath.splitext(name.strip().lower())
    return _EXTENSIONS.get(ext, "unknown")

from digest_builder_core.assembler import build_digest, build_preview, export_filename
from digest_builder_core.config import Settings, load_settings
from digest_builder_core.csl import CslImportResult, import_csl
from digest_builder_core.drafts import DraftStorageError, LocalDraftStore, attach_autosave
from digest_builder_core.frontmatter import generate_frontmatter, yaml_escape
from digest_builder_core.gist import GistDraftStorage, GistError
from digest_builder_core.interchange import DigestImportError, dump_state, import_state, load_state, to_json
from digest_builder_core.locations import collect_locations
from digest_builder_core.models import DerivedLocation, Document, Frontmatter, LocationOverride, Section
from digest_builder_core.renderers import render_entry
from digest_builder_core.sorting import sort_entries
from digest_builder_core.store import DigestStore
from digest_builder_core.validation import ValidationIssue, validate_document

__all__ = [
    "__version__",
    "CslImportResult",
    "DerivedLocation",
    "DigestImportError",
    "DigestStore",
    "Document",
    "DraftStorageError",
    "Frontmatter",
    "GistDraftStorage",
    "GistError",
    "LocalDraftStore",
    "LocationOverride",
    "Section",
    "Settings",
    "ValidationIssue",
    "attach_autosave",
    "build_digest",
    "build_preview",
    "collect_locations",
    "dump_state",
    "export_filename",
    "generate_frontmatter",
    "import_csl",
    "import_state",
    "load_settings",
    "load_state",
    "render_entry",
    "sort_entries",
    "to_json",
    "validate_document",
    "yaml_escape",
]

__version__ = "0.1.0"

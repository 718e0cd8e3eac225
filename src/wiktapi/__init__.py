"""wiktapi: a read-only multilingual dictionary built from Wiktionary extracts."""

__version__ = "0.1.0"

from .config import (
    Settings as Settings,
    load_settings as load_settings,
)

from .dictionary import Dictionary as Dictionary

from .exceptions import (
    DictionaryError as DictionaryError,
    ValidationError as ValidationError,
    WordNotFoundError as WordNotFoundError,
    MalformedDataError as MalformedDataError,
    DataImportError as DataImportError,
    DatabaseError as DatabaseError,
    ConfigError as ConfigError,
)

from .importer import (
    import_file as import_file,
    import_lines as import_lines,
    index_database as index_database,
    run_import as run_import,
)

from .merge import merge_rows as merge_rows

from .models import (
    Category as Category,
    PhoneticType as PhoneticType,
    PhoneticItem as PhoneticItem,
    Definition as Definition,
    Meaning as Meaning,
    TranslationItem as TranslationItem,
    Tenses as Tenses,
    StorageRow as StorageRow,
    WordRecord as WordRecord,
    SearchResult as SearchResult,
    WordSummary as WordSummary,
    WordPage as WordPage,
    ImportStats as ImportStats,
)

from .normalizer import (
    Classifier as Classifier,
    default_classifier as default_classifier,
    normalize as normalize,
)

__all__ = [
    # Facade
    "Dictionary",
    # Configuration
    "Settings",
    "load_settings",
    # Exceptions
    "DictionaryError",
    "ValidationError",
    "WordNotFoundError",
    "MalformedDataError",
    "DataImportError",
    "DatabaseError",
    "ConfigError",
    # Import pipeline
    "normalize",
    "Classifier",
    "default_classifier",
    "import_lines",
    "import_file",
    "run_import",
    "index_database",
    # Merge
    "merge_rows",
    # Models
    "Category",
    "PhoneticType",
    "PhoneticItem",
    "Definition",
    "Meaning",
    "TranslationItem",
    "Tenses",
    "StorageRow",
    "WordRecord",
    "SearchResult",
    "WordSummary",
    "WordPage",
    "ImportStats",
]

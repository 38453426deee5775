"""TidyTodo core library — todo state engine, filtering, reordering, persistence.

Public API re-exports for convenient imports:
    from tidytodo import TodoSession, TodoStore, FilterMode, ...
"""

# Workspace & config
from tidytodo.workspace import (
    workspace_root,
    config_path,
    storage_path,
    log_path,
)
from tidytodo.config import (
    Config,
    load_config,
    save_config,
    configure_logging,
)

# Models
from tidytodo.models import (
    TodoItem,
    Action,
    FilterMode,
    EditTarget,
    UIState,
)

# Transitions & store
from tidytodo.todos import (
    EDIT_MAX_LENGTH,
    validate_text,
    validate_edit_text,
    find_todo,
    move_todo,
    reduce,
    IdGenerator,
)
from tidytodo.store import TodoStore

# Derived views
from tidytodo.filters import (
    apply_filter,
    counts,
    FilterEngine,
)
from tidytodo.reorder import ReorderController
from tidytodo.ratelimit import Debouncer

# Persistence
from tidytodo.persistence import (
    LocalStorage,
    MemoryStorage,
    StorageError,
    TodoPersistence,
    PersistenceSync,
)

# Session
from tidytodo.session import TodoSession

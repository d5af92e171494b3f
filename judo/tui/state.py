"""Screen state machine for the judo TUI.

Holds the active screen, the popup text editor, the loaded lists and the
database registry, and routes every key event to the handler of the active
screen. Textual only renders what this object exposes and forwards keys to
`handle_key`; nothing here depends on a running terminal.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Optional

from judo.core.config import Config, ConfigError, DBConfig, db_connection_str, validate_db_name
from judo.core.cursor import InputState
from judo.core.models import ListsComponent, UIList
from judo.core.ordered import ItemsController, ListsController
from judo.core.storage import Database, StorageError

logger = logging.getLogger(__name__)


class Screen(str, Enum):
    MAIN = "Main"
    ADD_LIST = "AddList"
    MODIFY_LIST = "ModifyList"
    ADD_ITEM = "AddItem"
    MODIFY_ITEM = "ModifyItem"
    CHANGE_DB = "ChangeDB"
    ADD_DB = "AddDB"


POPUP_TITLES: Dict[Screen, str] = {
    Screen.ADD_LIST: "Add List",
    Screen.MODIFY_LIST: "Modify List",
    Screen.ADD_ITEM: "Add Item",
    Screen.MODIFY_ITEM: "Modify Item",
    Screen.ADD_DB: "Add Database",
}

LIST_POPUPS = (Screen.ADD_LIST, Screen.MODIFY_LIST)
ITEM_POPUPS = (Screen.ADD_ITEM, Screen.MODIFY_ITEM)

Connector = Callable[[str], Database]


def normalize_key(key: str) -> str:
    """Fold terminal-specific spellings of shifted letters into the letter itself."""
    k = key or ""
    if k.startswith("shift+") and len(k) == len("shift+") + 1 and k[-1].isalpha():
        return k[-1].upper()
    return k


def _is_text_input(character: Optional[str]) -> bool:
    return bool(character) and len(character) == 1 and character.isprintable()


class ScreenStateMachine:
    """Top-level controller of the TUI.

    Collaborator failures (StorageError, ConfigError) raised while handling a
    key are caught here: they are logged, a one-line `status` is recorded and
    the screen, lists and selections stay as they were before the key.
    """

    def __init__(
        self,
        config: Config,
        current_db_config: DBConfig,
        db: Database,
        lists_component: ListsComponent,
        *,
        connect: Connector = Database.connect,
    ):
        self.config = config
        self.current_db_config = current_db_config
        self.db = db
        self.lists_component = lists_component
        self._connect = connect

        self.screen: Screen = Screen.MAIN
        self.input_state = InputState()
        self.selected_db_index: int = 0
        self.set_as_default: bool = False
        self.status: str = ""
        self.exit: bool = False

    @classmethod
    def from_config(cls, config: Config, *, connect: Connector = Database.connect) -> "ScreenStateMachine":
        """
        Connect to the default database and load its lists.

        Raises:
            ConfigError: If the default database is missing or ambiguous
            StorageError: If the database cannot be opened or read
        """
        default_db = config.get_default()
        db = connect(default_db.connection_str)
        lists = ListsComponent()
        try:
            ListsController(lists, db).reload()
        except StorageError:
            db.close()
            raise
        logger.info(f"Opened database '{default_db.name}' with {len(lists.lists)} list(s)")
        return cls(config, default_db, db, lists, connect=connect)

    def close(self) -> None:
        self.db.close()

    # -----------------------
    # Views used for rendering
    # -----------------------
    @property
    def lists(self) -> ListsController:
        return ListsController(self.lists_component, self.db)

    def selected_list(self) -> Optional[UIList]:
        return self.lists_component.get_selected_list()

    def items(self) -> Optional[ItemsController]:
        ui_list = self.selected_list()
        if ui_list is None:
            return None
        return ItemsController(ui_list, self.db)

    def popup_title(self) -> Optional[str]:
        return POPUP_TITLES.get(self.screen)

    # -----------------------
    # Dispatch
    # -----------------------
    def handle_key(self, key: str, character: Optional[str] = None) -> bool:
        """
        Route one key event to the active screen.

        Args:
            key: Textual key name ("a", "S", "enter", "shift+up", ...)
            character: The printable character for the key, if any

        Returns:
            True if the key was bound on the active screen, False if ignored
        """
        screen = self.screen
        if screen is Screen.MAIN:
            handler = self._handle_main
        elif screen in LIST_POPUPS or screen in ITEM_POPUPS:
            handler = self._handle_name_popup
        elif screen is Screen.CHANGE_DB:
            handler = self._handle_change_db
        elif screen is Screen.ADD_DB:
            handler = self._handle_add_db
        else:  # pragma: no cover
            raise AssertionError(f"Unhandled screen {screen!r}")

        try:
            return handler(key, character)
        except (StorageError, ConfigError) as e:
            logger.warning(f"Command on {screen.value} failed: {e}")
            self.status = f"Error: {e}"
            return True

    def _run(self, action: Callable[[], None]) -> None:
        action()
        self.status = ""

    # -----------------------
    # Main screen
    # -----------------------
    def _handle_main(self, key: str, character: Optional[str]) -> bool:
        k = normalize_key(key)
        lists = self.lists
        items = self.items()

        if k == "q":
            self.exit = True
        elif k == "A":
            self.enter_add_list_screen()
        elif k == "M":
            self.enter_modify_list_screen()
        elif k == "D":
            self._run(lists.delete)
        elif k == "w":
            lists.select_previous()
        elif k == "s":
            lists.select_next()
        elif k == "W":
            self._run(lists.move_up)
        elif k == "S":
            self._run(lists.move_down)
        elif k == "C":
            self.enter_change_db_screen()
        elif k == "a":
            self.enter_add_item_screen()
        elif k == "m":
            self.enter_modify_item_screen()
        elif items is None:
            return False
        elif k == "d":
            self._run(items.delete)
        elif k == "down":
            items.select_next()
        elif k == "up":
            items.select_previous()
        elif k == "shift+up":
            self._run(items.move_up)
        elif k == "shift+down":
            self._run(items.move_down)
        elif k == "right":
            items.select_first()
        elif k == "left":
            items.deselect()
        elif k in ("enter", "space"):
            self._run(items.toggle_done)
        else:
            return False
        return True

    def enter_add_list_screen(self) -> None:
        self.input_state = InputState()
        self.screen = Screen.ADD_LIST

    def enter_modify_list_screen(self) -> None:
        ui_list = self.selected_list()
        if ui_list is None:
            return
        self.input_state = InputState.prefilled(ui_list.list.name)
        self.screen = Screen.MODIFY_LIST

    def enter_add_item_screen(self) -> None:
        if self.selected_list() is None:
            return
        self.input_state = InputState()
        self.screen = Screen.ADD_ITEM

    def enter_modify_item_screen(self) -> None:
        ui_list = self.selected_list()
        if ui_list is None:
            return
        item = ui_list.selected_item()
        if item is None:
            return
        self.input_state = InputState.prefilled(item.name)
        self.screen = Screen.MODIFY_ITEM

    def enter_change_db_screen(self) -> None:
        idx = self.config.index_of(self.current_db_config.name)
        self.selected_db_index = idx if idx is not None else 0
        self.screen = Screen.CHANGE_DB

    # -----------------------
    # Text popups
    # -----------------------
    def _edit_text(self, key: str, character: Optional[str]) -> bool:
        st = self.input_state
        if key == "backspace":
            st.delete_before_cursor()
        elif key == "delete":
            st.delete_after_cursor()
        elif key == "left":
            st.move_left()
        elif key == "right":
            st.move_right()
        elif key == "home":
            st.move_home()
        elif key == "end":
            st.move_end()
        elif _is_text_input(character):
            st.insert(character)
        else:
            return False
        return True

    def _handle_name_popup(self, key: str, character: Optional[str]) -> bool:
        if key == "escape":
            self.screen = Screen.MAIN
            self.input_state.reset()
            return True
        if key == "enter":
            self._commit_name()
            return True
        return self._edit_text(key, character)

    def _commit_name(self) -> None:
        name = self.input_state.text.strip()
        if not name:
            return

        if self.screen in LIST_POPUPS:
            controller = self.lists
        else:
            controller = self.items()
            if controller is None:
                return

        if self.input_state.is_modifying:
            controller.rename(name)
        else:
            controller.create(name)

        self.screen = Screen.MAIN
        self.input_state.reset()
        self.status = ""

    # -----------------------
    # Database selector
    # -----------------------
    def _handle_change_db(self, key: str, character: Optional[str]) -> bool:
        k = normalize_key(key)
        if k == "escape":
            self.screen = Screen.MAIN
        elif k == "up":
            self.select_previous_db()
        elif k == "down":
            self.select_next_db()
        elif k == "enter":
            self.switch_to_selected_db()
        elif k == "A":
            self.input_state = InputState()
            self.set_as_default = False
            self.screen = Screen.ADD_DB
        elif k == "S":
            self.set_selected_db_as_default()
        else:
            return False
        return True

    def select_previous_db(self) -> None:
        n = len(self.config.dbs)
        if n == 0:
            return
        self.selected_db_index = n - 1 if self.selected_db_index == 0 else self.selected_db_index - 1

    def select_next_db(self) -> None:
        n = len(self.config.dbs)
        if n == 0:
            return
        self.selected_db_index = (self.selected_db_index + 1) % n

    def switch_to_selected_db(self) -> None:
        """
        Replace the connection and lists with those of the selected database.

        The new database is connected and fully loaded before anything is
        replaced; a failure leaves the current database and its lists in place.
        """
        dbs = self.config.dbs
        if not (0 <= self.selected_db_index < len(dbs)):
            return
        target = dbs[self.selected_db_index]

        new_db = self._connect(target.connection_str)
        lists = ListsComponent()
        try:
            ListsController(lists, new_db).reload()
        except StorageError:
            new_db.close()
            raise

        old_db = self.db
        self.db = new_db
        self.current_db_config = target
        self.lists_component = lists
        if old_db is not new_db:
            old_db.close()
        self.screen = Screen.MAIN
        self.status = ""
        logger.info(f"Switched to database '{target.name}'")

    def set_selected_db_as_default(self) -> None:
        dbs = self.config.dbs
        if not (0 <= self.selected_db_index < len(dbs)):
            return
        previous = self.config.default
        self.config.set_default(dbs[self.selected_db_index].name)
        try:
            self.config.write()
        except ConfigError:
            self.config.default = previous
            raise
        self.status = f"Default database: {self.config.default}"

    # -----------------------
    # Add database popup
    # -----------------------
    def _handle_add_db(self, key: str, character: Optional[str]) -> bool:
        if key == "escape":
            self.screen = Screen.CHANGE_DB
            self.input_state.reset()
            return True
        if key == "tab":
            self.set_as_default = not self.set_as_default
            return True
        if key == "enter":
            name = self.input_state.text.strip()
            if not name:
                return True
            ok, err = validate_db_name(name)
            if not ok:
                self.status = f"Error: {err}"
                return True
            self.create_new_database(name, self.set_as_default)
            self.input_state.reset()
            self.screen = Screen.CHANGE_DB
            return True
        return self._edit_text(key, character)

    def create_new_database(self, db_name: str, set_as_default: bool) -> None:
        """
        Create the database file, register it and persist the registry.

        Raises:
            ConfigError: If the name is taken or the registry cannot be written
            StorageError: If the database file cannot be created
        """
        if self.config.get_by_name(db_name) is not None:
            raise ConfigError(f"A database named '{db_name}' already exists")

        descriptor = DBConfig(name=db_name, connection_str=db_connection_str(db_name))
        self._connect(descriptor.connection_str).close()

        previous_default = self.config.default
        self.config.add_db(descriptor)
        if set_as_default:
            self.config.default = db_name
        try:
            self.config.write()
        except ConfigError:
            self.config.dbs.remove(descriptor)
            self.config.default = previous_default
            raise

        self.selected_db_index = len(self.config.dbs) - 1
        self.status = f"Added database: {db_name}"
        logger.info(f"Created database '{db_name}' at {descriptor.connection_str}")


__all__ = ["Screen", "ScreenStateMachine", "POPUP_TITLES", "normalize_key"]

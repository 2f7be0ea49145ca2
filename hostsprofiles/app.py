"""State and actions of the hosts manager: entries, profiles, import and export."""

from __future__ import annotations

import json
import socket
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from hostsprofiles.hosts import (
    HOSTS_PATH,
    LOCALHOST,
    HostEntry,
    Line,
    load_hosts_entries,
    write_hosts_entries,
)
from hostsprofiles.profiles import (
    Profile,
    ProfileError,
    ProfileStore,
    profile_from_dict,
    profile_to_dict,
)

DEFAULT_PROFILE_NAME = "Default"
_NO_IP_FOUND = "Impossibile trovare un IP per l'hostname."


class View(Enum):
    """The screen currently shown."""

    MAIN = "main"
    PROFILES = "profiles"


def resolve_host(hostname: str) -> str:
    """Return the first address the resolver gives for hostname."""
    try:
        infos = socket.getaddrinfo(hostname, None)
    except (OSError, UnicodeError) as exc:
        raise LookupError(_NO_IP_FOUND) from exc
    if not infos:
        raise LookupError(_NO_IP_FOUND)
    return str(infos[0][4][0])


class HostsApp:
    """The editable hosts list, the profiles and the status shown to the user."""

    def __init__(
        self,
        store_factory: Callable[[], ProfileStore] = ProfileStore,
        hosts_path: Union[str, Path] = HOSTS_PATH,
        resolver: Callable[[str], str] = resolve_host,
    ) -> None:
        self._store_factory = store_factory
        self.hosts_path = hosts_path
        self._resolver = resolver

        self.input_text = ""
        self.input_ip = ""
        self.input_hostname = ""
        self.file_lines: list[Line] = []
        self.editing_index: Optional[int] = None
        self.editing_ip = ""
        self.editing_hostname = ""
        self.error_message: Optional[str] = None
        self.success_message: Optional[str] = None

        self.profiles: list[Profile] = []
        self.selected_profile: Optional[Profile] = None
        self.new_profile_name = ""
        self.view = View.MAIN

    # -- helpers -----------------------------------------------------------

    def _reset_status(self) -> None:
        self.error_message = None
        self.success_message = None

    def _save_succeeded(self) -> None:
        self.error_message = None
        self.success_message = "Salvataggio riuscito."

    def _write_hosts(self) -> None:
        try:
            write_hosts_entries(self.file_lines, self.hosts_path)
        except OSError as exc:
            self.error_message = str(exc)
        else:
            self._save_succeeded()

    def _persist(self, profile: Profile) -> None:
        """Store the current lines in the profile, the hosts file and the database."""
        profile.hosts = list(self.file_lines)
        self._write_hosts()
        try:
            with self._store_factory() as store:
                store.update_profile(profile)
        except ProfileError as exc:
            self.error_message = f"Errore nell'aggiornamento del database: {exc}"

    def _add_entry(self, entry: HostEntry) -> bool:
        """Append an entry and save it; return whether a profile received it."""
        self.file_lines.append(entry)
        if self.selected_profile is None:
            self.error_message = "Seleziona un profilo per aggiungere un host."
            return False
        self._persist(self.selected_profile)
        return True

    # -- profiles ----------------------------------------------------------

    def load_profiles(self) -> None:
        """Load the profiles, creating 'Default' from the hosts file if there are none."""
        self._reset_status()
        try:
            store = self._store_factory()
        except ProfileError as exc:
            self.error_message = f"Errore nell'inizializzazione del database: {exc}"
            return
        with store:
            try:
                profiles = store.all_profiles()
            except ProfileError as exc:
                self.error_message = f"Errore nel caricamento dei profili: {exc}"
                return
            if not profiles:
                self.success_message = "Creazione del profilo 'Default'..."
                try:
                    store.create_profile(DEFAULT_PROFILE_NAME, load_hosts_entries(self.hosts_path))
                except ProfileError as exc:
                    self.error_message = (
                        f"Errore nella creazione del profilo di default: {exc}"
                    )
                    return
        if not profiles:
            self.load_profiles()
            return

        self.profiles = profiles
        active = next((p for p in profiles if p.is_active), None)
        if active is not None:
            self.selected_profile = active
            self.file_lines = list(active.hosts)
            self.success_message = f"Caricato il profilo: {active.name}"
        else:
            self.selected_profile = profiles[0]
            self.file_lines = list(self.selected_profile.hosts)
            self.success_message = f"Caricato il profilo di default: {self.selected_profile.name}"

    def select_profile(self, profile: Profile) -> None:
        """Make a profile the current one, write it out and mark it active."""
        self._reset_status()
        self.selected_profile = profile
        self.file_lines = list(profile.hosts)
        try:
            with self._store_factory() as store:
                store.set_active(profile.id)
        except ProfileError as exc:
            self.error_message = f"Errore nell'attivazione del profilo: {exc}"
        else:
            self.load_profiles()
        self._write_hosts()

    def create_profile(self) -> None:
        """Create a profile named after new_profile_name holding only localhost."""
        self._reset_status()
        name = self.new_profile_name
        if not name:
            self.error_message = "Il nome del profilo non può essere vuoto."
            return
        try:
            with self._store_factory() as store:
                store.create_profile(name, [LOCALHOST])
        except ProfileError as exc:
            self.error_message = f"Errore nella creazione del profilo: {exc}"
            return
        self.load_profiles()

    def delete_profile(self, profile_id: str) -> None:
        """Delete a profile other than the selected one."""
        self._reset_status()
        selected = self.selected_profile
        if selected is not None and selected.id == profile_id:
            if selected.name == DEFAULT_PROFILE_NAME:
                self.error_message = "Impossibile eliminare il profilo 'Default'."
            else:
                self.error_message = (
                    "Impossibile eliminare il profilo attivo. "
                    "Seleziona un altro profilo prima di procedere."
                )
            return
        self.success_message = "Eliminazione del profilo..."
        try:
            with self._store_factory() as store:
                store.delete_profile(profile_id)
        except ProfileError as exc:
            self.error_message = f"Errore nell'eliminazione del profilo: {exc}"
            return
        self.load_profiles()

    def export_profile(self, path: Optional[Union[str, Path]]) -> None:
        """Write the selected profile as JSON; a None path means the user cancelled."""
        self._reset_status()
        profile = self.selected_profile
        if profile is None:
            self.error_message = "Seleziona un profilo da esportare."
            return
        if path is None:
            self.error_message = "Operazione di esportazione annullata."
            return
        data = json.dumps(profile_to_dict(profile), indent=2, ensure_ascii=False)
        try:
            Path(path).write_text(data, encoding="utf-8")
        except OSError as exc:
            self.error_message = f"Errore di scrittura del file: {exc}"
            return
        self.success_message = "Profilo esportato con successo!"

    def import_profile(self, path: Optional[Union[str, Path]]) -> None:
        """Read a profile from JSON and store it; a None path means the user cancelled."""
        self._reset_status()
        if path is None:
            self.error_message = "Operazione di importazione annullata."
            return
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.error_message = f"Errore di lettura del file: {exc}"
            return
        try:
            profile = profile_from_dict(json.loads(text))
        except (ValueError, ProfileError) as exc:
            self.error_message = f"Errore di deserializzazione: {exc}"
            return
        try:
            store = self._store_factory()
        except ProfileError as exc:
            self.error_message = str(exc)
            return
        with store:
            try:
                store.import_profile(profile)
            except ProfileError as exc:
                self.error_message = f"Errore di importazione: {exc}"
                return
        self.success_message = "Profilo importato con successo!"

    # -- entries -----------------------------------------------------------

    def add_manual(self) -> None:
        """Add the record typed in input_ip and input_hostname."""
        self._reset_status()
        ip, hostname = self.input_ip, self.input_hostname
        if not hostname or not ip:
            self.error_message = "IP e Hostname non possono essere vuoti."
            return
        self.input_ip = ""
        self.input_hostname = ""
        self._add_entry(HostEntry(ip, hostname))

    def dns_lookup(self) -> None:
        """Resolve input_text and add a record for the address found."""
        self._reset_status()
        hostname = self.input_text
        if not hostname:
            self.error_message = "L'hostname non può essere vuoto per il lookup DNS."
            return
        self.success_message = "Ricerca IP in corso..."
        try:
            address = self._resolver(hostname)
        except (LookupError, OSError) as exc:
            self._reset_status()
            self.error_message = str(exc) or _NO_IP_FOUND
            return
        self._reset_status()
        self.success_message = f"IP trovato: {address}"
        if not self._add_entry(HostEntry(address, hostname)):
            self.input_text = ""

    def delete_entry(self, index: int) -> None:
        """Remove the line at index, if there is one."""
        self._reset_status()
        if not 0 <= index < len(self.file_lines):
            return
        del self.file_lines[index]
        if self.selected_profile is not None:
            self._persist(self.selected_profile)

    def start_edit(self, index: int) -> None:
        """Begin editing the record at index."""
        self._reset_status()
        if not 0 <= index < len(self.file_lines):
            return
        line = self.file_lines[index]
        if isinstance(line, HostEntry):
            self.editing_index = index
            self.editing_ip = line.ip
            self.editing_hostname = line.hostname

    def save_edit(self) -> None:
        """Apply the edited address and hostname to the record being edited."""
        self._reset_status()
        index = self.editing_index
        if index is None or not 0 <= index < len(self.file_lines):
            return
        line = self.file_lines[index]
        if not isinstance(line, HostEntry):
            return
        self.file_lines[index] = HostEntry(self.editing_ip, self.editing_hostname, line.comment)
        self.editing_index = None
        self.editing_ip = ""
        self.editing_hostname = ""
        if self.selected_profile is not None:
            self._persist(self.selected_profile)
        else:
            self.error_message = "Select a profile to save changes."

    def cancel_edit(self) -> None:
        """Leave edit mode without changes."""
        self._reset_status()
        self.editing_index = None
        self.editing_ip = ""
        self.editing_hostname = ""

    # -- views -------------------------------------------------------------

    def show_main(self) -> None:
        """Switch to the hosts list."""
        self._reset_status()
        self.view = View.MAIN

    def show_profiles(self) -> None:
        """Switch to the profile management screen."""
        self._reset_status()
        self.view = View.PROFILES
"""Tk window for the hosts manager: the hosts list and the profile screen."""

from __future__ import annotations

import argparse
from typing import Any, Callable, Optional

from hostsprofiles.app import DEFAULT_PROFILE_NAME, HostsApp, View
from hostsprofiles.hosts import HOSTS_PATH, LOCALHOST, Comment, HostEntry
from hostsprofiles.profiles import ProfileStore

WINDOW_TITLE = "Hosts manager"
ERROR_COLOUR = "#cc3333"
SUCCESS_COLOUR = "#33b333"
HEADING_COLOUR = "#1a80cc"
MUTED_COLOUR = "#808080"
NO_PROFILE_TEXT = "Nessun profilo selezionato"
_JSON_FILETYPES = [("JSON Profile", "*.json")]


def status_text(app: HostsApp) -> tuple[str, Optional[str]]:
    """Return the status message to show and its colour; errors win over successes."""
    if app.error_message is not None:
        return app.error_message, ERROR_COLOUR
    if app.success_message is not None:
        return app.success_message, SUCCESS_COLOUR
    return "", None


def entry_label(entry: HostEntry) -> str:
    """Text of a record in the list: the address padded to 15 columns, then the name."""
    return f"{entry.ip:<15} {entry.hostname}"


def is_protected(entry: HostEntry) -> bool:
    """Whether the record is the localhost one, which cannot be edited or deleted."""
    return entry.ip == LOCALHOST.ip and entry.hostname == LOCALHOST.hostname


class HostsWindow:
    """Widgets showing a HostsApp; rebuilt by refresh after every action."""

    def __init__(self, app: HostsApp, root: Any) -> None:
        import tkinter
        from tkinter import filedialog

        self._tk = tkinter
        self._filedialog = filedialog
        self.app = app
        self.root = root
        self._frame: Any = None
        self._status_label: Any = None
        root.title(WINDOW_TITLE)
        root.geometry("820x640")
        self.refresh()

    # -- plumbing ----------------------------------------------------------

    def refresh(self) -> None:
        """Rebuild the widgets of the current view from the application state."""
        if self._frame is not None:
            self._frame.destroy()
        self._frame = self._tk.Frame(self.root, padx=20, pady=20)
        self._frame.pack(fill="both", expand=True)
        if self.app.view is View.PROFILES:
            self._build_profiles_view(self._frame)
        else:
            self._build_main_view(self._frame)

    def _run(self, action: Callable[..., None], *args: Any) -> Callable[[], None]:
        def handler() -> None:
            action(*args)
            self.refresh()

        return handler

    def _update_status(self) -> None:
        if self._status_label is None:
            return
        message, colour = status_text(self.app)
        self._status_label.configure(text=message)
        if colour is not None:
            self._status_label.configure(fg=colour)

    def _bound_entry(self, parent: Any, attr: str, width: int = 30) -> Any:
        var = self._tk.StringVar(master=parent, value=getattr(self.app, attr))

        def on_write(*_: object) -> None:
            setattr(self.app, attr, var.get())
            self.app.error_message = None
            self.app.success_message = None
            self._update_status()

        var.trace_add("write", on_write)
        entry = self._tk.Entry(parent, textvariable=var, width=width)
        entry._bound_var = var  # keep the variable alive with its widget
        return entry

    def _status(self, parent: Any) -> Any:
        self._status_label = self._tk.Label(parent, text="", anchor="w")
        self._update_status()
        return self._status_label

    def _scrollable(self, parent: Any) -> Any:
        tk = self._tk
        outer = tk.Frame(parent)
        outer.pack(fill="both", expand=True)
        canvas = tk.Canvas(outer, highlightthickness=0)
        scrollbar = tk.Scrollbar(outer, orient="vertical", command=canvas.yview)
        inner = tk.Frame(canvas)
        inner.bind("<Configure>", lambda _e: canvas.configure(scrollregion=canvas.bbox("all")))
        canvas.create_window((0, 0), window=inner, anchor="nw")
        canvas.configure(yscrollcommand=scrollbar.set)
        canvas.pack(side="left", fill="both", expand=True)
        scrollbar.pack(side="right", fill="y")
        return inner

    # -- main view ---------------------------------------------------------

    def _build_main_view(self, frame: Any) -> None:
        tk = self._tk
        app = self.app

        profile_row = tk.Frame(frame)
        profile_row.pack(fill="x", pady=(0, 20))
        name = app.selected_profile.name if app.selected_profile is not None else NO_PROFILE_TEXT
        tk.Label(profile_row, text=f"Profilo attuale: {name}", font=("TkDefaultFont", 14)).pack(
            side="left"
        )
        tk.Button(profile_row, text="Gestisci Profili", command=self._run(app.show_profiles)).pack(
            side="right"
        )

        add_section = tk.Frame(frame, bd=1, relief="groove", padx=15, pady=15)
        add_section.pack(fill="x", pady=(0, 20))
        tk.Label(
            add_section,
            text="Aggiungi un nuovo record:",
            fg=HEADING_COLOUR,
            font=("TkDefaultFont", 16),
        ).pack(anchor="w")

        dns_row = tk.Frame(add_section)
        dns_row.pack(fill="x", pady=5)
        self._bound_entry(dns_row, "input_text", 50).pack(side="left", fill="x", expand=True)
        tk.Button(dns_row, text="Cerca IP (DNS)", command=self._run(app.dns_lookup)).pack(
            side="left", padx=(10, 0)
        )

        tk.Label(add_section, text="oppure", fg=MUTED_COLOUR).pack(anchor="w")

        manual_row = tk.Frame(add_section)
        manual_row.pack(fill="x", pady=5)
        self._bound_entry(manual_row, "input_ip", 20).pack(side="left", fill="x", expand=True)
        self._bound_entry(manual_row, "input_hostname", 30).pack(
            side="left", fill="x", expand=True, padx=(10, 0)
        )
        tk.Button(manual_row, text="Aggiungi Manuale", command=self._run(app.add_manual)).pack(
            side="left", padx=(10, 0)
        )

        self._status(add_section).pack(fill="x")

        tk.Label(
            frame, text="Record nel file hosts:", fg=HEADING_COLOUR, font=("TkDefaultFont", 16)
        ).pack(anchor="w")
        entries = self._scrollable(frame)
        for index, line in enumerate(app.file_lines):
            self._build_line(entries, index, line)

    def _build_line(self, parent: Any, index: int, line: Any) -> None:
        tk = self._tk
        app = self.app
        if isinstance(line, HostEntry):
            row = tk.Frame(parent, pady=5)
            row.pack(fill="x")
            if app.editing_index == index:
                self._bound_entry(row, "editing_ip", 20).pack(side="left")
                self._bound_entry(row, "editing_hostname", 30).pack(side="left", padx=5)
                tk.Button(row, text="Salva", command=self._run(app.save_edit)).pack(side="left")
                tk.Button(row, text="Annulla", command=self._run(app.cancel_edit)).pack(
                    side="left", padx=5
                )
                return
            state = "disabled" if is_protected(line) else "normal"
            tk.Label(row, text=entry_label(line), font="TkFixedFont", anchor="w", width=50).pack(
                side="left"
            )
            tk.Button(
                row, text="Modifica", state=state, command=self._run(app.start_edit, index)
            ).pack(side="left", padx=5)
            tk.Button(
                row, text="Elimina", state=state, command=self._run(app.delete_entry, index)
            ).pack(side="left")
        elif isinstance(line, Comment):
            tk.Label(parent, text=line.text, fg=MUTED_COLOUR, anchor="w").pack(fill="x")
        else:
            tk.Label(parent, text="").pack(fill="x")

    # -- profiles view -----------------------------------------------------

    def _build_profiles_view(self, frame: Any) -> None:
        tk = self._tk
        app = self.app

        tk.Label(
            frame, text="Gestione dei Profili", fg=HEADING_COLOUR, font=("TkDefaultFont", 22)
        ).pack(pady=(0, 20))

        new_row = tk.Frame(frame)
        new_row.pack(fill="x", pady=(0, 20))
        self._bound_entry(new_row, "new_profile_name", 40).pack(side="left", fill="x", expand=True)
        tk.Button(new_row, text="Crea", command=self._run(app.create_profile)).pack(
            side="left", padx=(10, 0)
        )

        self._status(frame).pack(fill="x")
        tk.Label(frame, text="Profili esistenti:", font=("TkDefaultFont", 15)).pack(anchor="w")

        listing = self._scrollable(frame)
        selected_id = app.selected_profile.id if app.selected_profile is not None else None
        for profile in app.profiles:
            row = tk.Frame(listing, pady=3)
            row.pack(fill="x")
            tk.Label(row, text=profile.name, anchor="w", width=40).pack(side="left")
            if profile.id == selected_id:
                tk.Button(row, text="Attivo", state="disabled").pack(side="left", padx=10)
            else:
                tk.Button(
                    row, text="Seleziona", command=self._run(app.select_profile, profile)
                ).pack(side="left", padx=10)
            if profile.name == DEFAULT_PROFILE_NAME:
                tk.Button(row, text="Default", state="disabled").pack(side="left")
            else:
                tk.Button(
                    row, text="Elimina", command=self._run(app.delete_profile, profile.id)
                ).pack(side="left")

        io_row = tk.Frame(frame)
        io_row.pack(pady=20)
        tk.Button(io_row, text="Esporta profilo selezionato", command=self._export).pack(
            side="left"
        )
        tk.Button(io_row, text="Importa profilo", command=self._import).pack(side="left", padx=10)

        tk.Button(frame, text="Torna alla vista principale", command=self._run(app.show_main)).pack()

    def _export(self) -> None:
        profile = self.app.selected_profile
        if profile is None:
            self.app.export_profile(None)
        else:
            chosen = self._filedialog.asksaveasfilename(
                parent=self.root,
                defaultextension=".json",
                filetypes=_JSON_FILETYPES,
                initialfile=f"{profile.name}.json",
            )
            self.app.export_profile(chosen or None)
        self.refresh()

    def _import(self) -> None:
        chosen = self._filedialog.askopenfilename(parent=self.root, filetypes=_JSON_FILETYPES)
        self.app.import_profile(chosen or None)
        self.refresh()


def main(argv: Optional[list[str]] = None) -> int:
    """Open the hosts manager window."""
    parser = argparse.ArgumentParser(prog="hostsprofiles", description="Manage hosts-file profiles.")
    parser.add_argument("--hosts-file", default=HOSTS_PATH, help="hosts file to manage")
    parser.add_argument("--database", default=None, help="profiles database file")
    args = parser.parse_args(argv)

    import tkinter

    database = args.database

    def store_factory() -> ProfileStore:
        return ProfileStore(database)

    app = HostsApp(store_factory=store_factory, hosts_path=args.hosts_file)
    root = tkinter.Tk()
    window = HostsWindow(app, root)
    app.load_profiles()
    window.refresh()
    root.mainloop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
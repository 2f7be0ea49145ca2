# hostsprofiles

A small desktop tool for keeping several versions of your hosts file as
named profiles and switching between them.

Each profile is a list of hosts-file lines (entries, comments and blank
lines) stored in an SQLite database in your user data directory
(`profiles.db` under the `hosts_manager` data directory that `platformdirs`
picks for your system). Selecting a profile writes its lines to the hosts
file and marks it active. Adding, editing or deleting an entry updates both
the hosts file and the stored profile. A `127.0.0.1 localhost` entry is
always written at the top of the hosts file if the profile lacks one.

The window uses Tk (`tkinter`, from the standard library), and its labels
and messages are in Italian.

## Installing

```
pip install .
```

## Running

```
hostsprofiles
```

Options:

- `--hosts-file PATH`: the hosts file to manage (default `/etc/hosts`);
- `--database PATH`: the profiles database file (default: the one in your
  user data directory).

Writing the system hosts file needs the right permissions, so you will
usually run it with elevated privileges, or point `--hosts-file` at another
file.

On start, if no profile exists, a profile called `Default` is created from
the current contents of the hosts file. Then the active profile is loaded,
or the first one if none is active.

From the main view you can:

- look up a hostname by DNS and add an entry for the first address it
  resolves to;
- add an entry by typing an IP address and a hostname;
- edit or delete entries (the `127.0.0.1 localhost` entry cannot be edited
  or deleted).

From the profiles view you can:

- create a profile, which starts out holding only the localhost entry;
- select a profile, which writes it to the hosts file and makes it active;
- delete a profile (not the `Default` profile, nor the one currently
  selected);
- export the selected profile to a JSON file, or import one from JSON. An
  imported profile gets a new id, and is refused if a profile with the same
  name already exists.

In the hosts file each entry is written as `ip hostname`. A comment that
followed an entry on the same line is kept in the profile but not written
back to the file.

## Using it as a library

```python
from hostsprofiles.hosts import parse_hosts, render_hosts
from hostsprofiles.profiles import ProfileStore

lines = parse_hosts("127.0.0.1 localhost\n10.0.0.5 build.local # CI\n")
print(render_hosts(lines))

with ProfileStore("profiles.db") as store:
    store.create_profile("Work", lines)
    for profile in store.all_profiles():
        print(profile.name, profile.is_active)
```

- `hostsprofiles.hosts`: `HostEntry`, `Comment` and `Empty` lines;
  `parse_hosts`, `load_hosts_entries`, `render_hosts`, `write_hosts_entries`,
  and `line_to_json` / `line_from_json` for their JSON form.
- `hostsprofiles.profiles`: `Profile`, `ProfileStore` (create, list,
  activate, update, delete and import profiles), `ProfileError`,
  `profile_to_dict` / `profile_from_dict` and `default_db_path`.
- `hostsprofiles.app`: `HostsApp`, the state and actions behind the window,
  usable without a display; `resolve_host` does the DNS lookup.
- `hostsprofiles.gui`: `HostsWindow` and `main`, the command above.

In JSON, a profile is an object with `id`, `name`, `hosts` and `is_active`;
each line is `{"Entry": {"ip": ..., "hostname": ..., "comment": ...}}`,
`{"Comment": "..."}` or `"Empty"`.

## Tests

```
pip install .[test]
pytest
```
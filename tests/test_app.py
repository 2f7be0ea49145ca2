import json
import socket
from unittest import mock

import pytest

from hostsprofiles.app import HostsApp, View, resolve_host
from hostsprofiles.hosts import Comment, HostEntry, LOCALHOST, parse_hosts
from hostsprofiles.profiles import ProfileError, ProfileStore, profile_to_dict

HOSTS_TEXT = "127.0.0.1 localhost\n# note\n10.0.0.1 box # main\n"


@pytest.fixture
def env(tmp_path):
    db = tmp_path / "profiles.db"
    hosts = tmp_path / "hosts"
    hosts.write_text(HOSTS_TEXT)

    def factory():
        return ProfileStore(db)

    return factory, hosts


def make_app(env, resolver=None):
    factory, hosts = env
    if resolver is None:
        return HostsApp(factory, hosts)
    return HostsApp(factory, hosts, resolver)


def loaded(env, resolver=None):
    app = make_app(env, resolver)
    app.load_profiles()
    return app


def test_load_creates_default_profile(env):
    app = loaded(env)
    assert [p.name for p in app.profiles] == ["Default"]
    assert app.selected_profile.name == "Default"
    assert app.file_lines == parse_hosts(HOSTS_TEXT)
    assert app.success_message == "Caricato il profilo di default: Default"
    assert app.error_message is None


def test_load_database_failure(env):
    def failing():
        raise ProfileError("boom")

    app = HostsApp(failing, env[1])
    app.load_profiles()
    assert app.error_message == "Errore nell'inizializzazione del database: boom"


def test_add_manual_requires_both_fields(env):
    app = loaded(env)
    app.input_ip = "10.0.0.2"
    app.add_manual()
    assert app.error_message == "IP e Hostname non possono essere vuoti."
    assert app.input_ip == "10.0.0.2"


def test_add_manual_saves_file_and_db(env):
    factory, hosts = env
    app = loaded(env)
    app.input_ip = "10.0.0.2"
    app.input_hostname = "new.local"
    app.add_manual()
    assert app.success_message == "Salvataggio riuscito."
    assert app.input_ip == "" and app.input_hostname == ""
    assert app.file_lines[-1] == HostEntry("10.0.0.2", "new.local")
    assert "10.0.0.2 new.local\n" in hosts.read_text()
    with factory() as store:
        assert store.all_profiles()[0].hosts == app.file_lines


def test_add_manual_without_profile(env):
    app = make_app(env)
    app.input_ip = "10.0.0.2"
    app.input_hostname = "new.local"
    app.add_manual()
    assert app.error_message == "Seleziona un profilo per aggiungere un host."
    assert app.file_lines == [HostEntry("10.0.0.2", "new.local")]


def test_dns_lookup_adds_entry(env):
    app = loaded(env, resolver=lambda name: "192.0.2.5")
    app.input_text = "example.com"
    app.dns_lookup()
    assert app.file_lines[-1] == HostEntry("192.0.2.5", "example.com")
    assert "192.0.2.5 example.com\n" in env[1].read_text()


def test_dns_lookup_without_profile_clears_input(env):
    app = make_app(env, resolver=lambda name: "192.0.2.5")
    app.input_text = "example.com"
    app.dns_lookup()
    assert app.success_message == "IP trovato: 192.0.2.5"
    assert app.error_message == "Seleziona un profilo per aggiungere un host."
    assert app.input_text == ""


def test_dns_lookup_failure(env):
    def resolver(name):
        raise LookupError("Impossibile trovare un IP per l'hostname.")

    app = loaded(env, resolver=resolver)
    before = list(app.file_lines)
    app.input_text = "example.com"
    app.dns_lookup()
    assert app.error_message == "Impossibile trovare un IP per l'hostname."
    assert app.file_lines == before


def test_dns_lookup_empty(env):
    app = loaded(env)
    app.dns_lookup()
    assert app.error_message == "L'hostname non può essere vuoto per il lookup DNS."


def test_delete_entry(env):
    app = loaded(env)
    app.delete_entry(1)
    assert Comment("# note") not in app.file_lines
    assert "# note" not in env[1].read_text()
    before = list(app.file_lines)
    app.delete_entry(50)
    assert app.file_lines == before


def test_edit_keeps_comment(env):
    app = loaded(env)
    app.start_edit(2)
    assert (app.editing_index, app.editing_ip, app.editing_hostname) == (2, "10.0.0.1", "box")
    app.editing_ip = "10.0.0.9"
    app.save_edit()
    assert app.file_lines[2] == HostEntry("10.0.0.9", "box", " main")
    assert app.editing_index is None
    assert "10.0.0.9 box\n" in env[1].read_text()


def test_start_edit_ignores_comment(env):
    app = loaded(env)
    app.start_edit(1)
    assert app.editing_index is None


def test_cancel_edit(env):
    app = loaded(env)
    app.start_edit(0)
    app.cancel_edit()
    assert (app.editing_index, app.editing_ip, app.editing_hostname) == (None, "", "")


def test_create_profile(env):
    app = loaded(env)
    app.create_profile()
    assert app.error_message == "Il nome del profilo non può essere vuoto."
    app.new_profile_name = "work"
    app.create_profile()
    work = [p for p in app.profiles if p.name == "work"]
    assert len(work) == 1
    assert work[0].hosts == [LOCALHOST]


def test_create_duplicate_profile(env):
    app = loaded(env)
    app.new_profile_name = "Default"
    app.create_profile()
    assert app.error_message.startswith("Errore nella creazione del profilo:")


def test_select_profile_activates(env):
    factory, hosts = env
    app = loaded(env)
    app.new_profile_name = "work"
    app.create_profile()
    work = next(p for p in app.profiles if p.name == "work")
    app.select_profile(work)
    assert app.selected_profile.id == work.id
    assert app.selected_profile.is_active
    assert app.file_lines == [LOCALHOST]
    assert hosts.read_text() == "127.0.0.1 localhost\n"
    with factory() as store:
        assert [p.name for p in store.all_profiles() if p.is_active] == ["work"]


def test_delete_profile_rules(env):
    app = loaded(env)
    default = app.selected_profile
    app.delete_profile(default.id)
    assert app.error_message == "Impossibile eliminare il profilo 'Default'."
    app.new_profile_name = "work"
    app.create_profile()
    work = next(p for p in app.profiles if p.name == "work")
    app.select_profile(work)
    app.delete_profile(work.id)
    assert app.error_message.startswith("Impossibile eliminare il profilo attivo.")
    app.delete_profile(default.id)
    assert [p.name for p in app.profiles] == ["work"]


def test_export_import_round_trip(env, tmp_path):
    app = loaded(env)
    out = tmp_path / "default.json"
    app.export_profile(out)
    assert app.success_message == "Profilo esportato con successo!"
    assert json.loads(out.read_text()) == profile_to_dict(app.selected_profile)

    app.import_profile(out)
    assert app.error_message == (
        "Errore di importazione: Un profilo con il nome 'Default' esiste già."
    )

    data = json.loads(out.read_text())
    data["name"] = "copy"
    out.write_text(json.dumps(data))
    app.import_profile(out)
    assert app.success_message == "Profilo importato con successo!"
    app.load_profiles()
    copy = next(p for p in app.profiles if p.name == "copy")
    assert copy.hosts == app.selected_profile.hosts
    assert copy.id != app.selected_profile.id


def test_export_without_selection(env, tmp_path):
    app = make_app(env)
    app.export_profile(tmp_path / "x.json")
    assert app.error_message == "Seleziona un profilo da esportare."


def test_cancelled_dialogs(env):
    app = loaded(env)
    app.export_profile(None)
    assert app.error_message == "Operazione di esportazione annullata."
    app.import_profile(None)
    assert app.error_message == "Operazione di importazione annullata."


def test_import_bad_json(env, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    app = loaded(env)
    app.import_profile(bad)
    assert app.error_message.startswith("Errore di deserializzazione:")


def test_views(env):
    app = make_app(env)
    assert app.view is View.MAIN
    app.show_profiles()
    assert app.view is View.PROFILES
    app.show_main()
    assert app.view is View.MAIN


def test_resolve_host_first_address():
    infos = [
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("192.0.2.7", 0)),
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("192.0.2.8", 0)),
    ]
    with mock.patch("socket.getaddrinfo", return_value=infos):
        assert resolve_host("example.com") == "192.0.2.7"


def test_resolve_host_failure():
    with mock.patch("socket.getaddrinfo", side_effect=socket.gaierror("no")):
        with pytest.raises(LookupError, match="Impossibile trovare un IP"):
            resolve_host("example.com")
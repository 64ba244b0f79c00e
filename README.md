# ifupdown-ng

A network interface manager that reads `/etc/network/interfaces`, works out
the dependencies between interfaces, and brings them up or takes them down
by running executor programs and commands for each lifecycle phase. It keeps
track of which interfaces are configured in a state file so that shared
dependencies (bridge ports, bond members, VLAN parents) are reference counted.

No third-party libraries are needed at run time.

## Installation

```
pip install .
```

For running the test suite:

```
pip install .[test]
pytest
```

## Commands

All commands are applets of one program (`ifupdown_ng.multicall:main`),
which picks the applet by the name it was started under. Each applet is
installed under its own name, and `ifupdown <applet> [options]` runs any of
them.

| Command     | Purpose                                   |
|-------------|-------------------------------------------|
| `ifup`      | bring interfaces up                       |
| `ifdown`    | take interfaces down                      |
| `ifquery`   | query interface configuration             |
| `ifparse`   | redisplay interface configuration         |
| `ifctrstat` | display statistics about an interface     |
| `ifupdown`  | run one of the applets above by name      |

### ifup / ifdown

```
ifup [options] <interfaces>
ifdown [options] <interfaces>
ifup -a
```

An argument of the form `name=logical` configures the interface `name` from
the stanza `logical`. Interfaces that are already up (or already down) are
skipped unless `--force` is given; interfaces with configuration errors are
skipped unless forced. Template interfaces cannot change state. Dependencies
listed in `requires` are brought up first and taken down last. The state
file is rewritten when the command finishes (not with `--no-act`).

Up runs the phases `create`, `pre-up`, `up`, `post-up`; down runs
`pre-down`, `down`, `post-down`, `destroy`. In each phase the executors
named by `use` lines are run from the executor directory, then any command
lines keyed by the phase name (for example `post-up ip route add ...`), then
`/bin/run-parts /etc/network/if-<phase>.d` if that directory exists.

### ifquery

```
ifquery [options] <interfaces>
ifquery [options] --list
ifquery --state
```

* `-L, --list` list matching interfaces
* `-P, --pretty-print` print full stanzas instead of names
* `-D, --dot` print a dependency graph in Graphviz dot format
* `-p, --property PROPERTY` print the values of a property
* `-s, --state` show the recorded state
* `-r, --running` show only the names of configured (running) interfaces
* `-U, --allow-undefined` allow querying interfaces without a stanza

### ifparse

```
ifparse [options] <interfaces>
ifparse [options] --all
```

* `-F, --format FORMAT` output format, `ifupdown` (default) or `yaml-raw`
* `-A, --all` show all interfaces
* `-U, --allow-undefined` allow undefined (virtual) interfaces

### ifctrstat

```
ifctrstat [options] <interface> [counters...]
ifctrstat --list
```

Reads counters from `/sys/class/net/<interface>/statistics`; without counter
names all of them are shown. Available counters (case-insensitive) are
`rx.discard`, `rx.errors`, `rx.octets`, `rx.packets`, `tx.discard`,
`tx.errors`, `tx.octets` and `tx.packets`.

* `-L, --list` list available counters
* `-n, --no-label` print values without the counter label

### Common options

Every applet accepts `-h, --help` and `-V, --version`.

Interface matching (`ifup`, `ifdown`, `ifquery`, `ifparse`):

* `-a, --auto` only interfaces marked `auto`
* `-I, --include PATTERN` only interfaces matching a shell pattern
* `-X, --exclude PATTERN` never interfaces matching a shell pattern

Execution:

* `-f, --force` force (de)configuration
* `-i, --interfaces FILE` interface definitions (default `/etc/network/interfaces`)
* `-S, --state-file FILE` state file (default `/run/ifstate`)
* `-E, --executor-path PATH` executor directory (default `/usr/libexec/ifupdown-ng`)
* `-T, --timeout SECONDS` executor timeout (default 300; negative values give the default)
* `-l, --no-lock` do not lock the state while changing an interface
* `-n, --no-act` print commands instead of running them (implies `--verbose`)
* `-v, --verbose` show what is being run

## Configuration

Settings are read from `/etc/network/ifupdown-ng.conf` as `key = value`
lines. Boolean values are judged by their first character: `1`, `y`, `t`
mean true and `0`, `n`, `f` mean false (either case). A missing file leaves
the defaults, which are all enabled:

* `allow_addon_scripts` run `/etc/network/if-<phase>.d` scripts
* `allow_any_iface_as_template` allow inheriting from any interface
* `auto_executor_selection` pick executors from option prefixes
* `compat_create_interfaces` create stanzas for undeclared bridge ports
* `compat_ifupdown2_bridge_ports_inherit_vlans` copy `bridge-vids`/`bridge-pvid` to ports
* `implicit_template_conversion` turn inherited-from interfaces into templates
* `use_hostname_for_dhcp` add the system hostname as `dhcp-hostname` when using DHCP

## Interfaces file

```
auto eth0
iface eth0
    address 192.0.2.10/24
    gateway 192.0.2.1

template vlan-base
    use vlan

iface eth0.8 inherits vlan-base
    requires eth0

source-directory /etc/network/interfaces.d
```

Keywords are `auto`, `iface`/`interface`, `template`, `inherit` (or
`inherits` on the `iface` line), `address`, `gateway`, `hostname`/`dhcp-hostname`,
`use`, `source` and `source-directory`. `inet dhcp` and `inet ppp` on an
`iface` line select the `dhcp` and `ppp` executors. Addresses without a
prefix length get one from a `netmask` line, or `/24` (IPv4) and `/64`
(IPv6). Any other `key value` line becomes an option passed to executors as
an `IF_KEY` environment variable; a `prefix-` in the key selects the
`prefix` executor automatically. Common option names from other ifupdown
implementations (for example `bond-slaves`, `pointopoint`, `vrf`) are mapped
to their equivalents. Comments start with `#`, and a trailing backslash
continues a line.

## Using it from Python

```python
from ifupdown_ng.interface import InterfaceCollection
from ifupdown_ng.interface_file import ParseState
from ifupdown_ng.pretty_print import format_interface_eni
from ifupdown_ng.execute import ExecuteOptions

collection = InterfaceCollection()
ParseState(collection=collection).parse("/etc/network/interfaces")
for iface in collection:
    print(format_interface_eni(ExecuteOptions(mock=True), iface), end="")
```

Other building blocks: `ifupdown_ng.state.State` (the state file),
`ifupdown_ng.lifecycle.run` and `count_rdepends`, `ifupdown_ng.config.load_config`,
`ifupdown_ng.counters.read_counter` and `ifupdown_ng.yaml_tree.write_yaml`.

## What this package does not do

It does not include any executor programs. The lifecycle runs whatever
executables it finds in the executor directory (`link`, `static`, `dhcp`,
`bridge`, `bond` and so on, as named by `use` lines); if none are installed
there, bringing an interface up only runs the command lines and add-on
scripts from the configuration and does not configure anything by itself.
Counter statistics are read from Linux sysfs only.
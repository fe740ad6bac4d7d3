# releaser

`releaser` is a Python library for the steps of publishing compiled release
binaries:

- checking that release binaries exist (`target/release/<binary>` for a
  single target, `target/<arch>-<os>/release/<binary>` for each architecture
  and OS pair),
- packing each binary into a gzip-compressed tar archive and computing its
  SHA-256 checksum, with a `<archive>.sha256` file beside it,
- creating a GitHub release for the newest semantic-version git tag (or
  reusing the existing release of that tag) and uploading the archives and
  their checksum files,
- committing a Homebrew formula to a tap repository, either straight to a
  branch or through a pull request,
- publishing packages to crates.io with `cargo publish`.

## Installation

```
pip install .
```

## Configuration

`releaser.config.load_config(path, environ=None)` reads a TOML or JSON file.
If `path` is not a file, `path + ".toml"` and then `path + ".json"` are tried.
Every environment variable named `RELEASER_<KEY>` sets the top-level key
`<key>` (lower-cased) to the variable's string value before validation.
`parse_config(data)` validates a mapping directly. Missing required fields or
values of the wrong type raise `ValueError`.

```toml
[build]
binary = "mytool"

[release]
owner = "example-org"
repo = "mytool"
target_branch = "main"
prerelease = false
draft = false
body = "Release notes"

[brew]
name = "mytool"
description = "A tool"
homepage = "https://example.com"
install = 'bin.install "mytool"'
license = "MIT"
test = 'system "#{bin}/mytool", "--version"'
commit_message = "bump to {{version}}"

[brew.repository]
owner = "example-org"
name = "homebrew-tap"

[brew.commit_author]
name = "Release Bot"
email = "bot@example.com"

[brew.pull_request]
title = "Update formula"
base = "main"
head = "bumps-formula-version"
labels = ["release"]

[crates_io]
packages = ["mytool"]
allow_dirty = false
no_verify = false
```

The result is a `ReleaserConfig` with `build` (the raw table), `release`
(`ReleaseConfig`), and the optional `brew` (`BrewConfig`) and `crates_io`
(`CratesIoConfig`). In `brew`, `head` defaults to `main` and `commit_message`
to `update formula`; `{{version}}` in the commit message is replaced with the
release version. In `pull_request`, `base` defaults to `main` and `head` to
`bumps-formula-version`.

Calls to GitHub need a token in the `GITHUB_TOKEN` environment variable;
without it `releaser.httpclient.github_token()` raises `RuntimeError`.

## Usage

```python
from releaser.cli import init_logging, parse_args, publish_crates
from releaser.config import load_config
from releaser.publish import release_single

init_logging()
opts = parse_args(["--dry-run", "-o", "dist"])
config = load_config(opts.config)
opts.output.mkdir(parents=True, exist_ok=True)

packages = release_single(
    config.build["binary"], "tar.gz", config.release,
    opts.path, opts.dry_run, opts.output,
)
for package in packages:
    print(package.name, package.sha256)

if config.crates_io is not None and not opts.dry_run:
    publish_crates(config.crates_io, opts.path)
```

### Modules

- `releaser.cli` – `parse_args(argv)` returns `Opts` (`path`, default `.`;
  `-c/--config`, default `releaser.toml`; `-d/--dry-run`; `-o/--output`,
  default `.`). `init_logging()` sets the level from `LOG_LEVEL` (`trace`,
  `debug`, `info`, `warn`, `warning`, `error`, `off`; everything when unset)
  and raises `ValueError` on an unknown name. `publish_command(crates_io,
  package)` builds the `cargo publish` command line; `publish_crates(crates_io,
  path)` runs it for every package and returns the exit codes.
- `releaser.git` – `get_current_tag(base)` runs `git tag --list` and returns
  the highest semantic version as a `Tag`, with a leading `v` removed; it
  raises `LookupError` when there is none.
- `releaser.publish` – `release_single(...)` and `release_multi(binary,
  extension, archs, oses, release_info, base, dry_run, output_path)` check,
  archive and checksum the binaries. In a dry run they return `Package`s
  without URLs (`release_multi` also writes the `.sha256` files); otherwise
  they get the release with `get_release` (create, falling back to looking it
  up by tag) and upload every archive followed by its `.sha256` file. Also
  `zip_file`, `check_binary`, `generate_checksum`, `package_asset`.
- `releaser.brew` – `build_brew(brew_config, release_config, version,
  packages)` downloads the tag's source archive from GitHub to hash it and
  returns a `Brew`. `release_formula(brew, data, dry_run, output_path)` writes
  `data` to `<Name>.rb` in `output_path` and, unless dry run, commits it to
  the tap branch or calls `push_formula(brew)`, which creates the pull
  request's head branch, commits `<Name>.rb` read from the current directory,
  and opens the pull request with its assignees and labels.
- `releaser.github` – `instance()` returns the `GithubClient`;
  `instance().repo(owner, name)` gives a `RepositoryHandler` with
  `releases()`, `branches()`, `branch(name)` and `pull_request()`. `Release`
  has `upload_assets(assets, tag, output_path)`.
- `releaser.formula` – `Repository`, `Package`, `SingleTarget`, `BrewArch`,
  `MultiTarget`, `targets_from_packages(packages)` (consecutive packages
  grouped by OS) and `capitalize(name)`.
- `releaser.asset`, `releaser.checksum`, `releaser.tag`, `releaser.payloads`,
  `releaser.httpclient` – assets and matrix entries, SHA-256 of files, tags,
  GitHub request and response bodies, and the GitHub HTTP calls.

## What it does not do

- There is no `releaser` command; the steps are called from Python.
- It does not compile anything: the release binaries must already be built.
- It does not render formulas from templates: `release_formula` takes the
  formula text ready-made.

## Tests

```
pip install .[test]
pytest
```
# goclone/git_utils.py
import click
import git

_STAGES = {
    git.RemoteProgress.COUNTING: "counting objects",
    git.RemoteProgress.COMPRESSING: "compressing objects",
    git.RemoteProgress.WRITING: "writing objects",
    git.RemoteProgress.RECEIVING: "receiving objects",
    git.RemoteProgress.RESOLVING: "resolving deltas",
    git.RemoteProgress.FINDING_SOURCES: "finding sources",
    git.RemoteProgress.CHECKING_OUT: "checking out files",
}


class StderrProgress(git.RemoteProgress):
    """Echo a line to stderr each time a clone stage finishes."""

    def update(self, op_code, cur_count, max_count=None, message=""):
        if not op_code & self.END:
            return
        stage = _STAGES.get(op_code & self.OP_MASK, "progress")
        total = f"/{int(max_count)}" if max_count else ""
        line = f"{stage}: {int(cur_count)}{total}"
        if message:
            line += f" {message}"
        click.echo(line, err=True)


class GitCloner:
    """Clone capability backed by GitPython."""

    def clone(self, path, url, depth=1, progress=None):
        kwargs = {}
        if depth:
            kwargs["depth"] = depth
        return git.Repo.clone_from(url, path, progress=progress, **kwargs)

"""CLI Main Entry Point"""

import dataclasses
import sys
import time

from gh_helper.config import Config, load_config
from gh_helper.git import GitAnalyzer, GitError
from gh_helper.llm import get_client, LLMError
from gh_helper.analysis import (
    AnalysisResult, CommitSynthesizer, NoInputError, analyze_changes, analyze_whole_diff,
)
from gh_helper.output import dim, info, warning, impact_label, print_error, print_success, print_warning, Spinner

from gh_helper.cli.args import build_parser
from gh_helper.cli.commands import display_config, run_auth, run_status
from gh_helper.cli.utils import ask_action, confirm, display_message, edit_message, format_progress


def _resolve_config(args) -> Config:
    """Precedence: CLI args > environment variables > config file."""
    config = dataclasses.replace(load_config())
    config.apply_env()
    if args.provider:
        config.provider = args.provider
    if args.analysis_model:
        config.analysis_model = args.analysis_model
    if args.synthesis_model:
        config.synthesis_model = args.synthesis_model
    if args.timeout:
        config.timeout = args.timeout
    for warning_text in config.validate():
        print_warning(f"Config warning: {warning_text}")
    return config


def _display_analysis(result: AnalysisResult, verbose: bool) -> None:
    """Short summary of what the analysis found."""
    print(info("\n--- Change Analysis ---"))
    print(dim(f"Overall scope: {result.overall_scope}"))
    print(dim(f"Suggested type: {result.suggested_commit_type}"))

    major = result.by_impact("major")
    code = result.by_category("code")
    if major:
        print(warning(f"Major changes in {len(major)} files"))
    if code:
        print(info(f"Code changes in {len(code)} files"))

    if verbose:
        for analysis in result.file_analyses:
            print(f"  {impact_label(analysis.impact)} {analysis.file.path}: {dim(analysis.summary)}")

    print(info("--- End Analysis ---"))


def _analyze(git: GitAnalyzer, files, client, config: Config, args, timings: dict) -> tuple[AnalysisResult, str]:
    """Run the pipeline under a spinner. Returns (analysis, message)."""
    synthesizer = CommitSynthesizer(client, config)

    with Spinner(f"Analyzing {len(files)} files using {client.name}...") as spinner:
        t0 = time.time()
        if args.whole_diff:
            result = analyze_whole_diff(git.get_diff())
        else:
            result = analyze_changes(
                files, git.get_diff, client, config,
                progress_callback=lambda i, n, name: spinner.update(format_progress(i, n, name)),
            )
        timings['analysis'] = time.time() - t0

        spinner.update("Generating commit message...")
        t0 = time.time()
        message = synthesizer.synthesize(result)
        timings['synthesis'] = time.time() - t0

    return result, message


def _review_loop(message: str, result: AnalysisResult, synthesizer: CommitSynthesizer) -> str | None:
    """Accept, edit or regenerate. Returns the final message, or None if cancelled."""
    while True:
        display_message(message)
        action = ask_action()

        if action == 'accept':
            return message
        if action == 'cancel':
            return None
        if action == 'edit':
            edited = edit_message(message)
            if not edited:
                print_error("Commit message cannot be empty")
                continue
            return edited
        if action == 'regenerate':
            try:
                with Spinner("Regenerating commit message..."):
                    message = synthesizer.synthesize(result)
                print_success("Regenerated commit message")
            except LLMError as e:
                print_error(f"Failed to regenerate: {e}")


def _commit_and_push(git: GitAnalyzer, message: str, args, config: Config) -> int:
    try:
        git.commit(message)
    except GitError as e:
        print_error(f"Failed to commit: {e}")
        return 1
    print_success("Commit created successfully")

    should_push = args.push
    if not should_push and config.confirm_push and not args.yes and sys.stdin.isatty():
        should_push = confirm("Push commit to remote?")

    if should_push:
        try:
            with Spinner("Pushing to remote..."):
                git.push()
            print_success("Successfully pushed to remote")
        except GitError as e:
            print_error(f"Failed to push: {e}")
            print(warning("You can push manually with: git push"))
    return 0


def run_commit(args, config: Config) -> int:
    """Stage, analyze, review, commit, optionally push."""
    timings = {}
    try:
        git = GitAnalyzer()
        client = get_client(provider=config.provider, config=config)

        if not git.has_changes():
            print("No changes to commit")
            return 0

        if config.auto_stage and not args.no_stage:
            git.stage_all()

        files = git.list_changed_files()
        if not files:
            print("No staged changes found")
            return 0

        result, message = _analyze(git, files, client, config, args, timings)
    except (GitError, LLMError, NoInputError) as e:
        print_error(str(e))
        return 1

    print_success("Generated commit message")
    _display_analysis(result, args.verbose)
    if args.verbose:
        print(dim(f"  Timings: analysis={timings['analysis']:.2f}s, synthesis={timings['synthesis']:.2f}s"))

    if args.dry_run:
        display_message(message)
        return 0

    if not args.yes:
        message = _review_loop(message, result, CommitSynthesizer(client, config))
        if message is None:
            print(warning("Commit cancelled"))
            return 0

    return _commit_and_push(git, message, args, config)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        print_error("No command specified")
        parser.print_help()
        return 1

    config = _resolve_config(args)

    if args.command == 'commit':
        return run_commit(args, config)
    if args.command == 'status':
        return run_status(config)
    if args.command == 'auth':
        return run_auth(config, check=args.check, login=args.login)
    if args.command == 'config':
        return display_config(config)

    parser.print_help()
    return 1


def run() -> None:
    sys.exit(main())

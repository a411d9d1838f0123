import sys

args = sys.argv[1:]

if args and args[0] == "pref":
    from envchain.cli.prefs import run_prefs

    sys.exit(run_prefs(args[1:]))
else:
    from envchain.cli.runner import run_cli

    run_cli()

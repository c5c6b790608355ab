#!/usr/bin/env python3
"""
Runs the dashboard backend test suites.

  unit         mocked Supabase, no credentials needed (default)
  integration  live Supabase project from SUPABASE_URL / SUPABASE_ANON_KEY
  all          both
"""
import sys
import os
import subprocess
import argparse

TESTS_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
BACKEND_DIR = os.path.dirname(TESTS_DIR)
SUITES = {
    'unit': ['unit'],
    'integration': ['integration'],
    'all': ['unit', 'integration']
}
SUPABASE_VARS = ('SUPABASE_URL', 'SUPABASE_ANON_KEY')


def missing_supabase_vars(environ=None):
    environ = os.environ if environ is None else environ
    return [name for name in SUPABASE_VARS if not environ.get(name)]


def build_command(suite, coverage=True, verbose=False):
    cmd = [sys.executable, '-m', 'pytest']
    cmd.extend(os.path.join(TESTS_DIR, name) for name in SUITES[suite])

    if coverage:
        cmd.extend(['--cov=functions', '--cov=shared', '--cov-report=term-missing'])
        # Live runs only touch the record source, so the bar applies to unit runs
        if suite != 'integration':
            cmd.append('--cov-fail-under=80')
    if verbose:
        cmd.append('-v')
    if suite != 'unit':
        # Report skipped live tests instead of hiding them
        cmd.append('-rs')

    return cmd


def main():
    parser = argparse.ArgumentParser(description='Run the dashboard backend tests')
    parser.add_argument('suite', nargs='?', choices=sorted(SUITES), default='unit')
    parser.add_argument('--product-id', help='Product id queried by the live Supabase tests')
    parser.add_argument('--no-coverage', action='store_true', help='Skip coverage reporting')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    args = parser.parse_args()

    env = dict(os.environ)
    if args.suite != 'unit':
        missing = missing_supabase_vars(env)
        if missing and args.suite == 'integration':
            parser.error(f"integration tests need {', '.join(missing)}")
        if args.product_id:
            env['SUPABASE_TEST_PRODUCT_ID'] = args.product_id

    cmd = build_command(args.suite, coverage=not args.no_coverage, verbose=args.verbose)
    print(f"Running: {' '.join(cmd)}")

    sys.exit(subprocess.run(cmd, cwd=BACKEND_DIR, env=env, check=False).returncode)


if __name__ == '__main__':
    main()

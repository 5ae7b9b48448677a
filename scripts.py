from subprocess import CalledProcessError, run
import sys


def test(args):
    try:
        run(["flake8"], check=True)
        run(
            ["pytest", "--cov=computed_property", "--cov-report=term-missing"] + args,
            check=True,
        )
    except CalledProcessError:
        sys.exit(1)


def bench(args):
    try:
        run(["pytest", "bench", "--benchmark-only"] + args, check=True)
    except CalledProcessError:
        sys.exit(1)


def main():
    cmd = sys.argv[1] if len(sys.argv) > 1 else None
    if cmd == "test":
        test(sys.argv[2:])
    elif cmd == "bench":
        bench(sys.argv[2:])
    else:
        sys.exit(1)


if __name__ == "__main__":
    main()

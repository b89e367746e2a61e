#!/usr/bin/env python3
"""
Verification script for the Plot3DKit installation.
Run this to check that the dependencies import and the pipeline works.
"""

import sys


def check_imports():
    """Check if all required modules can be imported."""
    print("=" * 60)
    print("Checking Python Imports...")
    print("=" * 60)

    required = [
        ('numpy', 'NumPy'),
        ('scipy', 'SciPy'),
        ('matplotlib', 'Matplotlib'),
        ('pandas', 'Pandas'),
    ]

    optional = [
        ('pytest', 'pytest (test suite)'),
    ]

    all_ok = True

    for module, name in required:
        try:
            __import__(module)
            print(f"✅ {name}")
        except ImportError:
            print(f"❌ {name} - REQUIRED")
            all_ok = False

    print("\nOptional:")
    for module, name in optional:
        try:
            __import__(module)
            print(f"✅ {name}")
        except ImportError:
            print(f"⚠️  {name} - Optional")

    return all_ok


def check_plot3dkit():
    """Check if Plot3DKit can be imported."""
    print("\n" + "=" * 60)
    print("Checking Plot3DKit Package...")
    print("=" * 60)

    try:
        import Plot3DKit
        print("✅ Plot3DKit imported successfully")
        print(f"   Version: {Plot3DKit.__version__}")
        print(f"   Modes:   {', '.join(Plot3DKit.get_info()['modes'])}")
        return True
    except ImportError as e:
        print(f"❌ Cannot import Plot3DKit: {e}")
        return False


def check_pipeline():
    """Run every plot mode once on a small example."""
    print("\n" + "=" * 60)
    print("Checking Plot Modes...")
    print("=" * 60)

    from Plot3DKit import Plot, Plot3DKitError

    plot = Plot(verbose=False)
    rows = [[0, 0, 0], [1, 1, 1], [2, 0, 2], [1, 2, 0]]
    checks = [
        ('polygon', lambda: plot.plot_formula("x1^2 + sin(x3 * pi)")),
        ('recursion', lambda: plot.plot_formula("f(x1 - 0.05, x3) + 1")),
    ]
    for mode in ('scatterplot', 'lineplot', 'barchart',
                 'interpolatedpolygon', 'selforganizingmap'):
        checks.append((mode, lambda mode=mode: plot.plot_dataframe(
            rows, mode=mode, som_epochs=5)))

    all_ok = True
    for name, run in checks:
        try:
            result = run()
            print(f"✅ {name:22s} -> {type(result).__name__}")
        except (Plot3DKitError, ValueError) as e:
            print(f"❌ {name:22s} - {e}")
            all_ok = False
    return all_ok


def main():
    """Run all verification checks."""
    print("\n" + "=" * 60)
    print(" Plot3DKit Installation Verification")
    print("=" * 60 + "\n")

    results = [("Python packages", check_imports())]
    package_ok = check_plot3dkit()
    results.append(("Plot3DKit package", package_ok))
    if package_ok:
        results.append(("Plot modes", check_pipeline()))

    print("\n" + "=" * 60)
    print(" Summary")
    print("=" * 60)

    all_ok = all(r[1] for r in results)
    for name, ok in results:
        status = "✅ OK" if ok else "❌ FAILED"
        print(f"{status:10s} {name}")

    if not all_ok:
        print("\nInstall the package and its dependencies with:")
        print("   pip install -e \".[dev]\"")
    else:
        print("\n🎉 All checks passed! Your installation is complete.")

    return 0 if all_ok else 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
import argparse
import os
import sys
from pathlib import Path

def print_results(result, scenario):
    """Print the solve summary, per-shelf occupancy and assignment table"""
    print("\n" + "="*60)
    print(f"OPTIMIZATION {result.status.value.upper()}")
    print("="*60)
    if result.message:
        print(result.message)

    summary = result.get_summary()
    print(f"\nProducts placed: {summary['products_placed']}")
    print(f"Products unassigned: {summary['products_unassigned']}")
    print(f"Total facings: {summary['total_facings']}")
    print(f"Expected profit (objective): {result.objective_value:,.2f}")
    print(f"Elapsed: {result.elapsed_seconds:.2f}s")

    total_slots = sum(gondola.total_slots for gondola in scenario.gondolas)
    print(f"Layout: {len(scenario.gondolas)} gondolas, {total_slots} slots")

    if result.success:
        print("\nShelf occupancy:")
        for row in result.shelf_summary(scenario.gondolas, scenario.products):
            print(f"  - {row['gondola_id']}/{row['shelf_id']} (#{row['shelf_number']}, "
                  f"{row['visibility_level']} visibility): "
                  f"{row['occupied_slots']}/{row['total_slots']} slots, "
                  f"{row['distinct_products']} products, profit {row['expected_profit']:,.2f}")

        table = result.to_dataframe()
        if not table.empty:
            print("\nAssignments:")
            print(table.to_string(index=False))

    if result.unassigned_products:
        print(f"\nUnassigned: {', '.join(result.unassigned_products[:10])}")
        if len(result.unassigned_products) > 10:
            print(f"  ... and {len(result.unassigned_products) - 10} more")

    # Show warnings if any
    if result.warnings:
        print(f"\n⚠️  Warnings ({len(result.warnings)}):")
        for warning in result.warnings[:5]:
            print(f"  - {warning}")
        if len(result.warnings) > 5:
            print(f"  ... and {len(result.warnings) - 5} more warnings")

def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='Shelf-space Assignment Optimizer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py data/store.json
  python main.py data/store.json --time-limit 60 --min-diversity 0.5
  python main.py data/store.json --export output/assignments.csv
        """
    )

    parser.add_argument('scenario', help='JSON file with products, gondolas and config')
    parser.add_argument('--time-limit', '-t', type=float,
                       help='Solver time limit in seconds')
    parser.add_argument('--min-diversity', type=float,
                       help='Minimum fraction of distinct products per shelf')
    parser.add_argument('--max-facings', type=int,
                       help='Maximum facings per product')
    parser.add_argument('--validate', '-v', action='store_true',
                       help='Print the data validation report before optimizing')
    parser.add_argument('--export', '-e',
                       help='Write the assignment table to this CSV file')

    args = parser.parse_args()

    # The driver keeps a daily log file unless told otherwise
    os.environ.setdefault('SHELFSPACE_LOG_DIR', 'logs')

    from shelfspace.data_processing.data_loader import DataLoader
    from shelfspace.data_processing.data_validator import DataValidator
    from shelfspace.optimization.shelf_optimizer import ShelfSpaceOptimizer
    from shelfspace.utils.error_handler import ShelfSpaceError
    from shelfspace.utils.logger import get_logger
    from shelfspace.utils.monitor import monitor

    logger = get_logger()

    try:
        scenario = DataLoader().load_scenario(args.scenario)
    except (OSError, ValueError, ShelfSpaceError) as e:
        logger.error(f"Could not load scenario: {e}")
        print(f"\n❌ Error: {e}")
        sys.exit(1)

    overrides = {}
    if args.time_limit is not None:
        overrides['max_execution_seconds'] = args.time_limit
    if args.min_diversity is not None:
        overrides['min_diversity_fraction'] = args.min_diversity
    if args.max_facings is not None:
        overrides['max_facings_per_product'] = args.max_facings
    config = scenario.config.with_overrides(**overrides)

    if args.validate:
        validator = DataValidator()
        validator.validate_products(scenario.products)
        validator.validate_layout(scenario.gondolas)
        print(validator.generate_validation_report())

    result = ShelfSpaceOptimizer(config).optimize(scenario.products, scenario.gondolas)
    print_results(result, scenario)

    timings = monitor.get_timings()
    if timings:
        print("\nTimings:")
        for name, duration in timings.items():
            print(f"  - {name}: {duration:.2f}s")

    if args.export and result.success:
        export_path = Path(args.export)
        export_path.parent.mkdir(parents=True, exist_ok=True)
        result.to_dataframe().to_csv(export_path, index=False)
        print(f"\nAssignments exported to {export_path}")

    sys.exit(0 if result.success else 2)

if __name__ == "__main__":
    main()

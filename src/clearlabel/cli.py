#!/usr/bin/env python3
"""
ClearLabel - command line interface
"""

import argparse

from .alternatives import AlternativeFinder
from .catalog import CatalogClient
from .comparison import compare_products
from .config import setup_logging
from .models import Winner
from .quantity import parse_quantity
from .scanner import ProductScanner
from .scoring import calculate_health_score, profile_from_product


def print_product(product):
    score = calculate_health_score(profile_from_product(product))
    print(f"\n{'='*50}")
    print(f"Product: {product.name}")
    print(f"Brand: {product.brand or 'N/A'}")
    print(f"Quantity: {product.quantity or 'N/A'}")
    print(f"Nutri-Score: {product.nutriscore_grade.value if product.nutriscore_grade else 'N/A'}")
    print(f"NOVA: {product.nova_group or 'N/A'}")
    print(f"Additives: {len(product.additives)}")
    print(f"Flagged ingredients: {len(product.flagged_ingredients)}")
    print(f"Health score: {score}/100 ({product.health_rating.value})")
    print(f"Source: {product.data_source}")
    print(f"{'='*50}\n")


def run_alternatives(scanner, finder, args):
    product = scanner.scan_barcode(args.barcode, args.avoid)
    if not product:
        print("Product not found")
        return 1

    print_product(product)
    alternatives = finder.find_healthier_alternatives(product, args.max_results, with_value=True)
    if not alternatives:
        print("No healthier alternatives found")
        return 0

    for alt in alternatives:
        badge = f" [{alt.value_badge.value}]" if alt.value_badge else ""
        print(f"{alt.rank}. {alt.name} ({alt.barcode}) - score {alt.health_score}{badge}")
        print(f"   {alt.improvement_reason}")
        if alt.quantity_comparison:
            print(f"   Size: {alt.quantity_comparison.description}")
    return 0


def run_compare(scanner, args):
    product_a = scanner.scan_barcode(args.barcode_a, args.avoid)
    product_b = scanner.scan_barcode(args.barcode_b, args.avoid)
    if not product_a or not product_b:
        print("Product not found")
        return 1

    verdict = compare_products(
        profile_from_product(product_a),
        profile_from_product(product_b),
        parse_quantity(product_a.quantity),
        parse_quantity(product_b.quantity)
    )

    print(f"\nA: {product_a.name} - {verdict.score_a}/100")
    print(f"B: {product_b.name} - {verdict.score_b}/100")
    if verdict.winner == Winner.TIE:
        print("Result: about the same")
    else:
        print(f"Result: {verdict.winner.value} is the better choice (+{verdict.margin})")

    for name, delta in verdict.deltas.items():
        value_a = 'N/A' if delta.value_a is None else delta.value_a
        value_b = 'N/A' if delta.value_b is None else delta.value_b
        print(f"  {name:<20} {value_a!s:>8} vs {value_b!s:<8} A is {delta.result.value}")
    return 0


def main(argv=None):
    """CLI interface"""
    parser = argparse.ArgumentParser(description='ClearLabel health engine')
    parser.add_argument('--avoid', action='append', default=[], help='Ingredient to flag (repeatable)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    alt_parser = subparsers.add_parser('alternatives', help='Find healthier alternatives')
    alt_parser.add_argument('barcode', type=str, help='Barcode to scan')
    alt_parser.add_argument('--max-results', type=int, default=None)

    compare_parser = subparsers.add_parser('compare', help='Compare two products')
    compare_parser.add_argument('barcode_a', type=str)
    compare_parser.add_argument('barcode_b', type=str)

    args = parser.parse_args(argv)
    setup_logging()

    catalog = CatalogClient()
    scanner = ProductScanner(catalog)

    if args.command == 'alternatives':
        return run_alternatives(scanner, AlternativeFinder(catalog), args)
    return run_compare(scanner, args)


if __name__ == "__main__":
    raise SystemExit(main())

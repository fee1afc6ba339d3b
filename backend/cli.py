import json
import argparse
import sys

from application.exceptions import InvalidMacroInputError
from backend.core.macro_calculator import (
    ActivityLevel,
    Gender,
    Goal,
    calculate_macros,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calculate daily calorie and macro targets")
    parser.add_argument("--weight", type=float, required=True, help="Body weight in kg")
    parser.add_argument("--height", type=float, required=True, help="Height in cm")
    parser.add_argument("--age", type=int, required=True, help="Age in years")
    parser.add_argument(
        "--gender",
        required=True,
        help=f"One of: {', '.join(g.value for g in Gender)} (or MAN/WOMAN/OTHER)",
    )
    parser.add_argument(
        "--activity",
        default=ActivityLevel.MODERATE.value,
        help="Activity level label or name (SEDENTARY, LOW, MODERATE, HIGH, VERY_HIGH)",
    )
    parser.add_argument(
        "--goal",
        default=Goal.MAINTAIN.value,
        help="Goal label or name (LOSE_WEIGHT, BUILD_MUSCLE, MAINTAIN)",
    )
    parser.add_argument("--json", action="store_true", help="Print the targets as JSON")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        targets = calculate_macros(
            args.weight,
            args.height,
            args.age,
            args.gender,
            args.activity,
            args.goal,
        )
    except InvalidMacroInputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(targets.to_dict(), ensure_ascii=False))
    else:
        print(f"BMR:      {targets.bmr} kcal")
        print(f"Calories: {targets.calories} kcal")
        print(f"Protein:  {targets.protein} g")
        print(f"Carbs:    {targets.carbs} g")
        print(f"Fat:      {targets.fat} g")
    return 0


if __name__ == "__main__":
    sys.exit(main())

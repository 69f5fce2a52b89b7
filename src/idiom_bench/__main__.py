from idiom_bench.cli import main

raise SystemExit(main())

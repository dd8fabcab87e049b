from .collect_chart import main

raise SystemExit(main())
